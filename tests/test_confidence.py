import unittest

from menu_ocr.confidence import (
    AMBIGUITY_FACTOR,
    NO_PRICE_CONFIDENCE,
    needs_review,
    score_confidence,
)


class ScoreConfidenceTests(unittest.TestCase):
    def test_bounds(self):
        self.assertEqual(score_confidence(0, 100), 1.0)
        self.assertEqual(score_confidence(100, 100), 0.5)
        self.assertEqual(score_confidence(500, 100), 0.5)
        self.assertEqual(score_confidence(None, 100), NO_PRICE_CONFIDENCE)

    def test_decreases_with_distance(self):
        scores = [score_confidence(d, 100) for d in (0, 10, 25, 50, 75, 100)]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertGreater(scores[0], scores[-1])

    def test_ambiguity_never_raises_score(self):
        for distance in (0, 30, 100):
            with self.subTest(distance=distance):
                plain = score_confidence(distance, 100)
                ambiguous = score_confidence(distance, 100, ambiguous=True)
                self.assertLess(ambiguous, plain)
                self.assertAlmostEqual(ambiguous, round(plain * AMBIGUITY_FACTOR, 3), places=3)

    def test_any_price_beats_no_price(self):
        self.assertGreater(score_confidence(100, 100, ambiguous=True), score_confidence(None, 100))


class NeedsReviewTests(unittest.TestCase):
    def test_rules(self):
        self.assertFalse(needs_review(120, 0.9))
        self.assertTrue(needs_review(None, 0.99))
        self.assertTrue(needs_review(120, 0.6))
        self.assertFalse(needs_review(120, 0.6, threshold=0.5))


if __name__ == "__main__":
    unittest.main()
