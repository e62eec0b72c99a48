"""Text canonicalization for price and dish-name fragments."""

from __future__ import annotations

import re
import unicodedata

# Glyphs printed between digits of vertical prices ("三・00・円").
SEPARATOR_GLYPHS = "・･·…‥."

_PRICE_STRIP_RE = re.compile(r"[\s　" + re.escape(SEPARATOR_GLYPHS) + r"]")
_NAME_EDGE_CHARS = SEPARATOR_GLYPHS + "-"
_NAME_LEADING_RE = re.compile(r"^[" + re.escape(_NAME_EDGE_CHARS) + r"\s　]+")
_NAME_TRAILING_RE = re.compile(r"[" + re.escape(_NAME_EDGE_CHARS) + r"\s　]+$")


def normalize_price_text(raw: str) -> str:
    """Remove all whitespace and decorative separators so digits become adjacent."""
    if not raw:
        return ""
    return _PRICE_STRIP_RE.sub("", raw)


def normalize_name(raw: str) -> str:
    """Trim whitespace and separator glyphs at the edges only.

    Internal spaces and separators are part of the dish name
    (``"ささみ 梅・わさび"``) and are kept as-is.
    """
    if not raw:
        return ""
    text = _NAME_LEADING_RE.sub("", raw.strip())
    return _NAME_TRAILING_RE.sub("", text)


def normalize_dish_name(raw: str) -> str:
    """Canonical form for comparing dish names across scans."""
    if not raw:
        return ""
    text = unicodedata.normalize("NFKC", raw)
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"[·/]", "・", text)
    return text.strip()


def same_dish_name(first: str, second: str) -> bool:
    return normalize_dish_name(first).lower() == normalize_dish_name(second).lower()


__all__ = [
    "SEPARATOR_GLYPHS",
    "normalize_price_text",
    "normalize_name",
    "normalize_dish_name",
    "same_dish_name",
]
