"""Typed structures shared by the menu parsing modules."""

from __future__ import annotations

from typing import List, NamedTuple, Optional, TypedDict, Union


class BBox(TypedDict):
    """Axis-aligned pixel box, origin top-left, ``y`` growing downward."""

    x: float
    y: float
    width: float
    height: float


class XRange(TypedDict):
    min: float
    max: float


class OcrWordRequired(TypedDict):
    text: str
    bbox: BBox


class OcrWord(OcrWordRequired, total=False):
    """Word-level OCR box inside a block."""

    confidence: float


class OcrBlockRequired(TypedDict):
    text: str
    bbox: BBox
    words: List[OcrWord]


class OcrBlock(OcrBlockRequired, total=False):
    """Single recognized text fragment as delivered by the OCR backend."""

    confidence: float


class OcrPage(TypedDict):
    width: float
    height: float
    blocks: List[OcrBlock]


class ColumnGroup(TypedDict):
    """Horizontally contiguous cluster of blocks."""

    columnIndex: int
    blocks: List[OcrBlock]
    xRange: XRange


class PriceParse(NamedTuple):
    """Outcome of a successful numeral extraction."""

    value: int
    digits: str
    notation: str  # "arabic" | "kanji" | "mixed"
    ambiguous: bool


class NameCandidate(NamedTuple):
    block: OcrBlock


class PriceCandidate(NamedTuple):
    block: OcrBlock
    value: int
    parse: PriceParse


Candidate = Union[NameCandidate, PriceCandidate]


class MatchedItemRequired(TypedDict):
    name: str
    price: Optional[int]
    rawText: str
    needsReview: bool


class MatchedItem(MatchedItemRequired, total=False):
    """Matcher output; ``distance`` and ``parse`` feed confidence scoring.

    ``priceBlock`` is the claimed price block and never reaches the caller.
    """

    distance: Optional[float]
    parse: Optional[PriceParse]
    bbox: BBox
    priceBlock: OcrBlock


class DetectedMenuItem(MatchedItemRequired, total=False):
    """Final engine output handed to the caller."""

    confidence: float
    note: str
    bbox: BBox
    sourceColumn: int


__all__ = [
    "BBox",
    "XRange",
    "OcrWord",
    "OcrBlock",
    "OcrPage",
    "ColumnGroup",
    "PriceParse",
    "NameCandidate",
    "PriceCandidate",
    "Candidate",
    "MatchedItem",
    "DetectedMenuItem",
]
