"""Assemble detected menu items from OCR blocks.

Flow: drop unusable geometry, optionally merge vertical word fragments,
drop noise, classify every block as name or price, cut the page into
columns, match names to prices inside each column and score the result.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Set, Union

from .columns import group_into_columns
from .confidence import needs_review, score_confidence
from .config import ParseMenuOptions
from .geometry import has_valid_bbox
from .matching import DEFAULT_MAX_MATCH_DISTANCE, match_name_and_price, match_name_and_price_optimal
from .merging import merge_vertical_words
from .noise import filter_noise_blocks, is_title_block
from .normalize import normalize_name
from .price import classify_block, split_trailing_price
from .types import (
    BBox,
    Candidate,
    ColumnGroup,
    DetectedMenuItem,
    MatchedItem,
    NameCandidate,
    OcrBlock,
    OcrPage,
    PriceCandidate,
)

logger = logging.getLogger(__name__)

ADAPTIVE_DISTANCE_RATIO = 0.1
ADAPTIVE_DISTANCE_MIN = 80.0
ADAPTIVE_DISTANCE_MAX = 150.0

NOTE_TITLE = "possible section heading"
NOTE_CROSS_COLUMN = "price taken from a neighbouring column"
NOTE_BAD_BBOX = "invalid bounding box"
NOTE_SHORT_NAME = "name too short"


def resolve_max_distance(options: ParseMenuOptions, page_height: Optional[float] = None) -> float:
    """Explicit option first, then a ceiling scaled to the page, then the default."""
    if options.max_match_distance is not None:
        return float(options.max_match_distance)
    if page_height:
        return max(ADAPTIVE_DISTANCE_MIN, min(page_height * ADAPTIVE_DISTANCE_RATIO, ADAPTIVE_DISTANCE_MAX))
    return DEFAULT_MAX_MATCH_DISTANCE


def _column_center(column: ColumnGroup) -> float:
    return (column["xRange"]["min"] + column["xRange"]["max"]) / 2.0


def _nearest_price_column(
    column: ColumnGroup,
    columns: Sequence[ColumnGroup],
    prices_by_column: Mapping[int, List[OcrBlock]],
) -> Optional[ColumnGroup]:
    best: Optional[ColumnGroup] = None
    best_distance = float("inf")
    center = _column_center(column)
    for other in columns:
        if not prices_by_column.get(other["columnIndex"]):
            continue
        distance = abs(_column_center(other) - center)
        if distance < best_distance:
            best = other
            best_distance = distance
    return best


def _finalize(
    matched: MatchedItem,
    column_index: int,
    max_distance: float,
    options: ParseMenuOptions,
    cross_column: bool = False,
) -> DetectedMenuItem:
    parse = matched.get("parse")
    ambiguous = parse is not None and parse.ambiguous
    confidence = score_confidence(matched.get("distance"), max_distance, ambiguous)
    name = matched["name"]
    review = (
        matched["needsReview"]
        or needs_review(matched["price"], confidence, options.review_threshold)
        or len(name) < 2
    )
    item: DetectedMenuItem = {
        "name": name,
        "price": matched["price"],
        "rawText": matched["rawText"],
        "needsReview": review,
        "confidence": confidence,
        "sourceColumn": column_index,
    }
    if "bbox" in matched:
        item["bbox"] = BBox(**matched["bbox"])
    if is_title_block(matched["rawText"]):
        item["needsReview"] = True
        item["note"] = NOTE_TITLE
    elif cross_column and matched["price"] is not None:
        item["note"] = NOTE_CROSS_COLUMN
    elif matched["price"] is not None and len(name) < 2:
        item["note"] = NOTE_SHORT_NAME
    return item


def _inline_item(block: OcrBlock, candidate: PriceCandidate) -> Optional[MatchedItem]:
    name, price = split_trailing_price(block.get("text", ""))
    if price is None or len(name) < 2:
        return None
    return {
        "name": name,
        "price": price,
        "rawText": block.get("text", ""),
        "needsReview": False,
        "distance": 0.0,
        "parse": candidate.parse,
        "bbox": block["bbox"],
    }


def _bad_geometry_item(block: OcrBlock) -> DetectedMenuItem:
    text = block.get("text", "")
    return {
        "name": normalize_name(text),
        "price": None,
        "rawText": text,
        "needsReview": True,
        "confidence": score_confidence(None, DEFAULT_MAX_MATCH_DISTANCE),
        "note": NOTE_BAD_BBOX,
    }


def parse_menu_blocks(
    blocks: Sequence[OcrBlock],
    options: Optional[ParseMenuOptions] = None,
    page_height: Optional[float] = None,
) -> List[DetectedMenuItem]:
    """Turn OCR blocks into detected menu items, column by column."""
    options = options or ParseMenuOptions()
    if not blocks:
        return []

    usable = [block for block in blocks if has_valid_bbox(block)]
    malformed = [block for block in blocks if not has_valid_bbox(block)]
    if malformed:
        logger.warning("Ignoring geometry of %d blocks with malformed bounding boxes", len(malformed))

    if options.merge_vertical_words:
        usable = merge_vertical_words(usable)
    if options.filter_noise:
        kept = filter_noise_blocks(usable)
        logger.debug("Noise filter dropped %d of %d blocks", len(usable) - len(kept), len(usable))
        usable = kept

    max_distance = resolve_max_distance(options, page_height)
    candidates: Dict[int, Candidate] = {id(block): classify_block(block) for block in usable}
    inline: Dict[int, MatchedItem] = {}
    if options.split_inline_items:
        for block in usable:
            candidate = candidates[id(block)]
            if isinstance(candidate, PriceCandidate):
                entry = _inline_item(block, candidate)
                if entry is not None:
                    inline[id(block)] = entry

    columns = group_into_columns(usable, options.max_columns, options.max_column_gap, options.right_to_left)
    prices_by_column: Dict[int, List[OcrBlock]] = {}
    for column in columns:
        prices_by_column[column["columnIndex"]] = [
            block
            for block in column["blocks"]
            if isinstance(candidates[id(block)], PriceCandidate) and id(block) not in inline
        ]

    match = match_name_and_price_optimal if options.assignment == "optimal" else match_name_and_price
    items: List[DetectedMenuItem] = []
    claimed: Set[int] = set()
    for column in columns:
        index = column["columnIndex"]
        names = [block for block in column["blocks"] if isinstance(candidates[id(block)], NameCandidate)]
        prices = prices_by_column[index]
        cross_column = False
        if names and not prices:
            fallback = _nearest_price_column(column, columns, prices_by_column)
            if fallback is not None:
                prices = prices_by_column[fallback["columnIndex"]]
                cross_column = True
                logger.debug(
                    "Column %d has no prices; matching against column %d", index, fallback["columnIndex"]
                )
        entries = match(names, prices, max_distance)
        claimed.update(id(entry["priceBlock"]) for entry in entries if "priceBlock" in entry)
        matched_by_block = {id(name): entry for name, entry in zip(names, entries)}

        for block in column["blocks"]:
            key = id(block)
            if key in inline:
                items.append(_finalize(inline[key], index, max_distance, options))
            elif key in matched_by_block:
                items.append(_finalize(matched_by_block[key], index, max_distance, options, cross_column))

    unclaimed = [
        block["text"]
        for column_prices in prices_by_column.values()
        for block in column_prices
        if id(block) not in claimed
    ]
    if unclaimed:
        logger.debug("Dropping %d unclaimed price blocks: %s", len(unclaimed), unclaimed)
    items.extend(_bad_geometry_item(block) for block in malformed)
    logger.info(
        "Parsed %d blocks into %d items across %d columns (%d need review)",
        len(blocks),
        len(items),
        len(columns),
        sum(1 for item in items if item["needsReview"]),
    )
    return items


def parse_menu_image_to_items(
    source: Union[OcrPage, Sequence[OcrBlock]],
    options: Optional[ParseMenuOptions] = None,
) -> List[DetectedMenuItem]:
    """Entry point: accept an OCR page (blocks plus image size) or bare blocks."""
    if isinstance(source, Mapping):
        height = source.get("height") or None
        return parse_menu_blocks(list(source.get("blocks", [])), options, page_height=height)
    return parse_menu_blocks(list(source), options)


__all__ = [
    "parse_menu_blocks",
    "parse_menu_image_to_items",
    "resolve_max_distance",
]
