import unittest

from menu_ocr.price import (
    classify_block,
    kansuji_to_int,
    parse_menu_line,
    parse_price_detail,
    parse_price_from_raw,
    split_trailing_price,
)
from menu_ocr.types import NameCandidate, PriceCandidate


def _block(text):
    return {"text": text, "bbox": {"x": 0, "y": 0, "width": 10, "height": 10}, "words": []}


class ParsePriceFromRawTests(unittest.TestCase):
    def test_known_notations(self):
        cases = [
            ("一 二 〇 円", 120),
            ("二五〇円", 250),
            ("三 00 円", 300),
            ("四50円", 450),
            ("６５０円", 650),
            ("350", 350),
            ("１２０円", 120),
            ("零五〇", 50),
            ("三・00・円", 300),
        ]
        for raw, expected in cases:
            with self.subTest(raw=raw):
                self.assertEqual(parse_price_from_raw(raw), expected)

    def test_no_price_outcomes(self):
        for raw in ("かしわ", "串焼", "※", "", "   ", "円"):
            with self.subTest(raw=raw):
                self.assertIsNone(parse_price_from_raw(raw))

    def test_longest_run_wins_and_first_on_tie(self):
        self.assertEqual(parse_price_from_raw("2個 500円"), 500)
        self.assertEqual(parse_price_from_raw("12円34円"), 12)


class ParsePriceDetailTests(unittest.TestCase):
    def test_pure_kanji_is_not_ambiguous(self):
        parsed = parse_price_detail("一二〇円")
        self.assertIsNotNone(parsed)
        self.assertEqual(parsed.value, 120)
        self.assertEqual(parsed.digits, "120")
        self.assertEqual(parsed.notation, "kanji")
        self.assertFalse(parsed.ambiguous)

    def test_mixed_run_is_ambiguous(self):
        parsed = parse_price_detail("三 00 円")
        self.assertEqual(parsed.notation, "mixed")
        self.assertTrue(parsed.ambiguous)

    def test_full_width_is_arabic(self):
        parsed = parse_price_detail("６５０円")
        self.assertEqual(parsed.notation, "arabic")
        self.assertFalse(parsed.ambiguous)

    def test_multiple_runs_are_ambiguous(self):
        self.assertTrue(parse_price_detail("2個 500円").ambiguous)

    def test_place_value_glyphs_are_ambiguous(self):
        parsed = parse_price_detail("三百円")
        self.assertEqual(parsed.value, 3)
        self.assertTrue(parsed.ambiguous)


class ClassifyBlockTests(unittest.TestCase):
    def test_price_candidate_carries_value(self):
        candidate = classify_block(_block("一二〇円"))
        self.assertIsInstance(candidate, PriceCandidate)
        self.assertEqual(candidate.value, 120)
        self.assertEqual(candidate.parse.digits, "120")

    def test_name_candidate(self):
        candidate = classify_block(_block("かしわ"))
        self.assertIsInstance(candidate, NameCandidate)
        self.assertEqual(candidate.block["text"], "かしわ")


class KansujiTests(unittest.TestCase):
    def test_positional(self):
        self.assertEqual(kansuji_to_int("五〇〇"), 500)
        self.assertEqual(kansuji_to_int("四50"), 450)

    def test_place_value(self):
        self.assertEqual(kansuji_to_int("三百五十"), 350)
        self.assertEqual(kansuji_to_int("千二百"), 1200)
        self.assertEqual(kansuji_to_int("十"), 10)

    def test_invalid(self):
        self.assertIsNone(kansuji_to_int(""))
        self.assertIsNone(kansuji_to_int("三x"))


class MenuLineTests(unittest.TestCase):
    def test_full_width_price(self):
        line = parse_menu_line("砂肝　３５０円")
        self.assertEqual(line.name, "砂肝")
        self.assertEqual(line.price, 350)
        self.assertFalse(line.needs_review)
        self.assertGreater(line.confidence, 0.8)

    def test_kanji_price(self):
        line = parse_menu_line("かしわ　三五〇円")
        self.assertEqual((line.name, line.price), ("かしわ", 350))

    def test_mixed_width_digits(self):
        line = parse_menu_line("つくね　４５0円")
        self.assertEqual((line.name, line.price), ("つくね", 450))

    def test_place_value_price(self):
        self.assertEqual(parse_menu_line("かしわ 三百五十円").price, 350)

    def test_price_without_currency(self):
        line = parse_menu_line("チーズベーコン　４５０")
        self.assertEqual((line.name, line.price), ("チーズベーコン", 450))

    def test_no_price_needs_review(self):
        line = parse_menu_line("枝豆")
        self.assertEqual(line.name, "枝豆")
        self.assertIsNone(line.price)
        self.assertTrue(line.needs_review)
        self.assertLess(line.confidence, 0.5)

    def test_short_name_needs_review(self):
        line = parse_menu_line("豆　３５０円")
        self.assertEqual(line.price, 350)
        self.assertTrue(line.needs_review)

    def test_empty(self):
        line = parse_menu_line("")
        self.assertEqual(line.name, "")
        self.assertIsNone(line.price)
        self.assertTrue(line.needs_review)

    def test_price_only_text_has_empty_name(self):
        self.assertEqual(split_trailing_price("一二〇円"), ("", 120))
        self.assertEqual(split_trailing_price("一品物"), ("一品物", None))

    def test_spaced_kanji_digits_form_one_price(self):
        self.assertEqual(split_trailing_price("かしわ 一 二 〇 円"), ("かしわ", 120))
        self.assertEqual(split_trailing_price("かしわ　一　二　〇"), ("かしわ", 120))

    def test_dotted_digits_form_one_price(self):
        self.assertEqual(split_trailing_price("かしわ三・00・円"), ("かしわ", 300))

    def test_spaced_price_line(self):
        line = parse_menu_line("つくね 一 五 〇 円")
        self.assertEqual((line.name, line.price), ("つくね", 150))
        self.assertFalse(line.needs_review)


if __name__ == "__main__":
    unittest.main()
