"""Confidence heuristics for detected menu items."""

from __future__ import annotations

from typing import Optional

NO_PRICE_CONFIDENCE = 0.3
AMBIGUITY_FACTOR = 0.7
DEFAULT_REVIEW_THRESHOLD = 0.75


def score_confidence(distance: Optional[float], max_distance: float, ambiguous: bool = False) -> float:
    """Score a name/price pairing between 0 and 1.

    Falls linearly from 1.0 at distance 0 to 0.5 at ``max_distance`` and is
    scaled down when the numeral reading was ambiguous. An item without a
    price gets a fixed low score.
    """
    if distance is None:
        return NO_PRICE_CONFIDENCE
    ratio = 1.0 if max_distance <= 0 else min(max(distance, 0.0) / max_distance, 1.0)
    score = 1.0 - 0.5 * ratio
    if ambiguous:
        score *= AMBIGUITY_FACTOR
    return round(score, 3)


def needs_review(price: Optional[int], confidence: float, threshold: float = DEFAULT_REVIEW_THRESHOLD) -> bool:
    return price is None or confidence < threshold


__all__ = [
    "AMBIGUITY_FACTOR",
    "DEFAULT_REVIEW_THRESHOLD",
    "NO_PRICE_CONFIDENCE",
    "needs_review",
    "score_confidence",
]
