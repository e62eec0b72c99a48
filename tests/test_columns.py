import unittest

from menu_ocr.columns import cap_columns, group_into_columns


def _block(text, x, y=0, width=20, height=20):
    return {"text": text, "bbox": {"x": x, "y": y, "width": width, "height": height}, "words": []}


def _texts(column):
    return [block["text"] for block in column["blocks"]]


class GroupIntoColumnsTests(unittest.TestCase):
    def setUp(self):
        self.a = _block("a", 0, y=50)
        self.b = _block("b", 30, y=10)
        self.c = _block("c", 200)

    def test_gap_threshold_splits_columns_left_to_right(self):
        columns = group_into_columns([self.c, self.a, self.b], 10, 48, right_to_left=False)
        self.assertEqual(len(columns), 2)
        self.assertEqual(_texts(columns[0]), ["b", "a"])  # sorted top to bottom
        self.assertEqual(_texts(columns[1]), ["c"])
        self.assertEqual(columns[0]["xRange"], {"min": 0, "max": 50})
        self.assertEqual([col["columnIndex"] for col in columns], [0, 1])

    def test_right_to_left_is_default(self):
        columns = group_into_columns([self.a, self.b, self.c], 10, 48)
        self.assertEqual(_texts(columns[0]), ["c"])
        self.assertEqual(columns[0]["columnIndex"], 0)
        self.assertEqual(sorted(_texts(columns[1])), ["a", "b"])

    def test_gap_equal_to_threshold_joins(self):
        columns = group_into_columns([_block("a", 0, width=10), _block("b", 58)], 10, 48)
        self.assertEqual(len(columns), 1)

    def test_overlapping_extents_join(self):
        columns = group_into_columns([_block("wide", 0, width=50), _block("narrow", 10, width=5)], 10, 0)
        self.assertEqual(len(columns), 1)

    def test_zero_gap_splits_disjoint_blocks(self):
        columns = group_into_columns([_block("a", 0), _block("b", 21)], 10, 0)
        self.assertEqual(len(columns), 2)

    def test_cap_merges_narrowest_adjacent_pair(self):
        blocks = [_block("p", 0, width=10), _block("q", 100, width=10), _block("r", 130, width=10)]
        columns = group_into_columns(blocks, 2, 5, right_to_left=False)
        self.assertEqual(len(columns), 2)
        self.assertEqual(_texts(columns[0]), ["p"])
        self.assertEqual(_texts(columns[1]), ["q", "r"])
        self.assertEqual(columns[1]["xRange"], {"min": 100, "max": 140})

    def test_cap_to_single_column(self):
        blocks = [_block(str(i), i * 100) for i in range(5)]
        columns = group_into_columns(blocks, 1, 5)
        self.assertEqual(len(columns), 1)
        self.assertEqual(len(columns[0]["blocks"]), 5)

    def test_empty_input(self):
        self.assertEqual(group_into_columns([], 3, 10), [])

    def test_invalid_configuration_fails_fast(self):
        with self.assertRaises(ValueError):
            group_into_columns([self.a], 0, 10)
        with self.assertRaises(ValueError):
            group_into_columns([self.a], 2, -1)

    def test_blocks_with_bad_bbox_are_skipped(self):
        bad = {"text": "x", "bbox": {"x": -1, "y": 0, "width": 5, "height": 5}, "words": []}
        columns = group_into_columns([bad, self.a], 3, 10)
        self.assertEqual(len(columns), 1)
        self.assertEqual(_texts(columns[0]), ["a"])

    def test_input_is_not_reordered(self):
        blocks = [self.c, self.a, self.b]
        group_into_columns(blocks, 10, 48)
        self.assertEqual([b["text"] for b in blocks], ["c", "a", "b"])


class CapColumnsTests(unittest.TestCase):
    def test_leftmost_pair_wins_on_equal_gaps(self):
        columns = [
            {"columnIndex": i, "blocks": [_block(str(i), i * 30, width=10)], "xRange": {"min": i * 30, "max": i * 30 + 10}}
            for i in range(3)
        ]
        capped = cap_columns(columns, 2)
        self.assertEqual([_texts(c) for c in capped], [["0", "1"], ["2"]])


if __name__ == "__main__":
    unittest.main()
