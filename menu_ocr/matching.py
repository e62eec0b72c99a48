"""Pair dish-name blocks with price blocks by vertical position."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import linear_sum_assignment

from .geometry import center_y, has_valid_bbox
from .normalize import normalize_name
from .price import parse_price_detail
from .types import MatchedItem, OcrBlock

logger = logging.getLogger(__name__)

# Comfortably larger than the line pitch of any real menu photo.
DEFAULT_MAX_MATCH_DISTANCE = 100.0


def vertical_distance(name: OcrBlock, price: OcrBlock) -> float:
    return abs(center_y(name) - center_y(price))


def _unmatched(name: OcrBlock) -> MatchedItem:
    item: MatchedItem = {
        "name": normalize_name(name.get("text", "")),
        "price": None,
        "rawText": name.get("text", ""),
        "needsReview": True,
        "distance": None,
        "parse": None,
    }
    if has_valid_bbox(name):
        item["bbox"] = name["bbox"]
    return item


def _matched(name: OcrBlock, price: OcrBlock, distance: float) -> MatchedItem:
    parsed = parse_price_detail(price.get("text", ""))
    value = parsed.value if parsed is not None else None
    return {
        "name": normalize_name(name.get("text", "")),
        "price": value,
        "rawText": f"{name.get('text', '')} {price.get('text', '')}",
        "needsReview": value is None,
        "distance": distance,
        "parse": parsed,
        "bbox": name["bbox"],
        "priceBlock": price,
    }


def match_name_and_price(
    names: Sequence[OcrBlock],
    prices: Sequence[OcrBlock],
    max_distance: float = DEFAULT_MAX_MATCH_DISTANCE,
) -> List[MatchedItem]:
    """Give every name the price block whose vertical center is closest.

    This is a greedy nearest-neighbour pass: two names may claim the same
    price block. Ties keep the earliest price in ``prices``. A name whose
    nearest price is farther than ``max_distance`` stays unmatched.
    """
    usable_prices = [p for p in prices if has_valid_bbox(p)]
    items: List[MatchedItem] = []
    for name in names:
        if not has_valid_bbox(name):
            items.append(_unmatched(name))
            continue
        best: Optional[OcrBlock] = None
        best_distance = float("inf")
        for price in usable_prices:
            distance = vertical_distance(name, price)
            if distance < best_distance:
                best = price
                best_distance = distance
        if best is None or best_distance > max_distance:
            items.append(_unmatched(name))
        else:
            items.append(_matched(name, best, best_distance))
    return items


def match_name_and_price_optimal(
    names: Sequence[OcrBlock],
    prices: Sequence[OcrBlock],
    max_distance: float = DEFAULT_MAX_MATCH_DISTANCE,
) -> List[MatchedItem]:
    """Conflict-free variant: each price block is used by at most one name.

    Solves the minimum total vertical distance assignment; pairs farther than
    ``max_distance`` are rejected after solving.
    """
    name_idx = [i for i, n in enumerate(names) if has_valid_bbox(n)]
    usable_prices = [p for p in prices if has_valid_bbox(p)]
    pairs: Dict[int, Tuple[OcrBlock, float]] = {}

    if name_idx and usable_prices:
        cost = np.array(
            [[vertical_distance(names[i], p) for p in usable_prices] for i in name_idx],
            dtype=float,
        )
        # Out-of-range pairs stay assignable but never beat an in-range one.
        penalty = max_distance * (len(name_idx) + len(usable_prices) + 1)
        cost = np.where(cost > max_distance, cost + penalty, cost)
        rows, cols = linear_sum_assignment(cost)
        for row, col in zip(rows, cols):
            distance = vertical_distance(names[name_idx[row]], usable_prices[col])
            if distance <= max_distance:
                pairs[name_idx[row]] = (usable_prices[col], distance)

    items: List[MatchedItem] = []
    for idx, name in enumerate(names):
        if idx in pairs:
            price, distance = pairs[idx]
            items.append(_matched(name, price, distance))
        else:
            items.append(_unmatched(name))
    logger.debug("Optimal assignment matched %d of %d names", len(pairs), len(names))
    return items


__all__ = [
    "DEFAULT_MAX_MATCH_DISTANCE",
    "match_name_and_price",
    "match_name_and_price_optimal",
    "vertical_distance",
]
