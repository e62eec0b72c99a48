"""Partition OCR blocks into vertical menu columns."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .geometry import has_valid_bbox, right_edge
from .types import ColumnGroup, OcrBlock

logger = logging.getLogger(__name__)


def _column_gap(left: ColumnGroup, right: ColumnGroup) -> float:
    return right["xRange"]["min"] - left["xRange"]["max"]


def _merge_columns(left: ColumnGroup, right: ColumnGroup) -> ColumnGroup:
    return {
        "columnIndex": left["columnIndex"],
        "blocks": left["blocks"] + right["blocks"],
        "xRange": {
            "min": min(left["xRange"]["min"], right["xRange"]["min"]),
            "max": max(left["xRange"]["max"], right["xRange"]["max"]),
        },
    }


def cap_columns(columns: List[ColumnGroup], max_columns: int) -> List[ColumnGroup]:
    """Merge the adjacent pair with the narrowest gap until ``max_columns`` remain.

    ``columns`` must be ordered left to right. On equal gaps the leftmost
    pair is merged first.
    """
    capped = list(columns)
    while len(capped) > max_columns:
        narrowest = 0
        narrowest_gap = _column_gap(capped[0], capped[1])
        for idx in range(1, len(capped) - 1):
            gap = _column_gap(capped[idx], capped[idx + 1])
            if gap < narrowest_gap:
                narrowest = idx
                narrowest_gap = gap
        logger.debug(
            "Merging columns at x=%.0f and x=%.0f (gap %.1fpx) to respect max_columns=%d",
            capped[narrowest]["xRange"]["min"],
            capped[narrowest + 1]["xRange"]["min"],
            narrowest_gap,
            max_columns,
        )
        capped[narrowest : narrowest + 2] = [_merge_columns(capped[narrowest], capped[narrowest + 1])]
    return capped


def group_into_columns(
    blocks: Sequence[OcrBlock],
    max_columns: int,
    max_column_gap: float,
    right_to_left: bool = True,
) -> List[ColumnGroup]:
    """Sweep blocks left to right and cut a new column at every wide horizontal gap.

    A block joins the running column while the distance from the column's
    right edge to the block's left edge is at most ``max_column_gap``
    (overlapping extents have a negative gap and always join). Columns are
    returned in reading order, right to left by default as on vertical
    Japanese menus, with each column's blocks sorted top to bottom.
    """
    if max_columns <= 0:
        raise ValueError(f"max_columns must be positive, got {max_columns}")
    if max_column_gap < 0:
        raise ValueError(f"max_column_gap must be non-negative, got {max_column_gap}")

    usable = [block for block in blocks if has_valid_bbox(block)]
    if len(usable) != len(blocks):
        logger.debug("Skipping %d blocks without a usable bbox", len(blocks) - len(usable))
    if not usable:
        return []

    ordered = sorted(usable, key=lambda b: (b["bbox"]["x"], b["bbox"]["y"]))
    columns: List[ColumnGroup] = []
    for block in ordered:
        left = block["bbox"]["x"]
        current = columns[-1] if columns else None
        if current is not None and left - current["xRange"]["max"] <= max_column_gap:
            current["blocks"].append(block)
            current["xRange"]["max"] = max(current["xRange"]["max"], right_edge(block))
            continue
        columns.append(
            {
                "columnIndex": len(columns),
                "blocks": [block],
                "xRange": {"min": left, "max": right_edge(block)},
            }
        )

    if len(columns) > max_columns:
        logger.info("Detected %d columns, merging down to %d", len(columns), max_columns)
        columns = cap_columns(columns, max_columns)

    if right_to_left:
        columns.reverse()
    for idx, column in enumerate(columns):
        column["columnIndex"] = idx
        column["blocks"].sort(key=lambda b: (b["bbox"]["y"], b["bbox"]["x"]))
    return columns


__all__ = ["cap_columns", "group_into_columns"]
