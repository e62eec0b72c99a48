"""Recognize OCR fragments that are not dishes: tax notes, headings, stray glyphs."""

from __future__ import annotations

import re
from typing import List, Sequence

from .price import parse_price_from_raw
from .types import OcrBlock

NON_MENU_PATTERNS = [
    re.compile(r"消費税"),
    re.compile(r"税込"),
    re.compile(r"※"),
    re.compile(r"表示価格"),
    re.compile(r"です。?$"),
    re.compile(r"お品書"),
    re.compile(r"メニュー"),
    re.compile(r"menu", re.IGNORECASE),
    re.compile(r"価格"),
    re.compile(r"料金"),
    re.compile(r"串焼"),
    re.compile(r"揚物"),
    re.compile(r"飯物"),
    re.compile(r"一品物"),
    re.compile(r"鉄板物?焼物?"),
    re.compile(r"焼物"),
    re.compile(r"^品$"),
]

# Section headings; kept on the item but flagged for review.
TITLE_KEYWORDS = (
    "串焼",
    "揚物",
    "飯物",
    "一品物",
    "鉄板焼物",
    "焼物",
    "品物",
    "メニュー",
    "お品書き",
)

_WHITESPACE_RE = re.compile(r"\s+")


def _compact(text: str) -> str:
    return _WHITESPACE_RE.sub("", text or "")


def is_noise_block(text: str) -> bool:
    compact = _compact(text)
    if not compact:
        return True
    if any(pattern.search(compact) for pattern in NON_MENU_PATTERNS):
        return True
    # a lone decorative glyph, unless it is a digit of a vertical price
    if len(compact) == 1 and parse_price_from_raw(compact) is None:
        return True
    return False


def is_title_block(text: str) -> bool:
    compact = _compact(text)
    return any(keyword in compact for keyword in TITLE_KEYWORDS)


def filter_noise_blocks(blocks: Sequence[OcrBlock]) -> List[OcrBlock]:
    return [block for block in blocks if not is_noise_block(block.get("text", ""))]


__all__ = [
    "NON_MENU_PATTERNS",
    "TITLE_KEYWORDS",
    "filter_noise_blocks",
    "is_noise_block",
    "is_title_block",
]
