"""Numeral grammar for menu prices.

Vertical Japanese menus print prices digit by digit: ``一二〇円`` is read as
the digit string "120", not as a place-value numeral. OCR output mixes
kanji digits, ASCII digits and full-width digits inside the same run
(``四50円``, ``三 00 円``), so extraction works on runs of any digit-bearing
glyph and reads them positionally.
"""

from __future__ import annotations

import re
from typing import Dict, NamedTuple, Optional, Tuple

from .normalize import SEPARATOR_GLYPHS, normalize_name, normalize_price_text
from .types import Candidate, NameCandidate, OcrBlock, PriceCandidate, PriceParse

KANJI_DIGITS: Dict[str, str] = {
    "〇": "0",
    "零": "0",
    "一": "1",
    "二": "2",
    "三": "3",
    "四": "4",
    "五": "5",
    "六": "6",
    "七": "7",
    "八": "8",
    "九": "9",
}
FULL_WIDTH_DIGITS: Dict[str, str] = {chr(ord("０") + i): str(i) for i in range(10)}
PLACE_VALUE_UNITS: Dict[str, int] = {"十": 10, "百": 100, "千": 1000}
CURRENCY_SUFFIXES = ("円", "えん", "ｴﾝ")

_KANJI_CLASS = "".join(KANJI_DIGITS)
_DIGIT_RUN_RE = re.compile(r"[0-9０-９" + _KANJI_CLASS + r"]+")
_PLACE_VALUE_RE = re.compile(r"[十百千万]")
_PRICE_GLYPH = r"[0-9０-９" + _KANJI_CLASS + r"十百千]"
_PRICE_GAP = r"[\s　" + re.escape(SEPARATOR_GLYPHS) + r"]*"
# Spaced or dotted digits ("一 二 〇 円", "三・00・円") still form one run.
_TRAILING_PRICE_RE = re.compile(
    r"(" + _PRICE_GLYPH + r"(?:" + _PRICE_GAP + _PRICE_GLYPH + r")*)"
    + _PRICE_GAP
    + r"(?:" + "|".join(CURRENCY_SUFFIXES) + r")?"
    + _PRICE_GAP
    + r"$"
)


def to_ascii_digit(ch: str) -> str:
    if "0" <= ch <= "9":
        return ch
    return KANJI_DIGITS.get(ch) or FULL_WIDTH_DIGITS.get(ch, "")


def _notation(run: str) -> str:
    has_kanji = any(ch in KANJI_DIGITS for ch in run)
    has_arabic = any(ch not in KANJI_DIGITS for ch in run)
    if has_kanji and has_arabic:
        return "mixed"
    return "kanji" if has_kanji else "arabic"


def parse_price_detail(raw: str) -> Optional[PriceParse]:
    """Extract the price and report how certain the reading is.

    The longest digit run wins; on equal length the first one is kept.
    ``ambiguous`` is set when notations are mixed inside the run, when the
    text holds more than one run, or when place-value glyphs (十百千万)
    suggest the positional reading may be wrong.
    """
    cleaned = normalize_price_text(raw)
    if not cleaned:
        return None
    runs = _DIGIT_RUN_RE.findall(cleaned)
    if not runs:
        return None
    best = runs[0]
    for run in runs[1:]:
        if len(run) > len(best):
            best = run
    digits = "".join(to_ascii_digit(ch) for ch in best)
    notation = _notation(best)
    ambiguous = (
        notation == "mixed"
        or len(runs) > 1
        or _PLACE_VALUE_RE.search(cleaned) is not None
    )
    return PriceParse(value=int(digits), digits=digits, notation=notation, ambiguous=ambiguous)


def parse_price_from_raw(raw: str) -> Optional[int]:
    """Return the integer price in ``raw`` or ``None`` when there is none."""
    parsed = parse_price_detail(raw)
    return parsed.value if parsed is not None else None


def classify_block(block: OcrBlock) -> Candidate:
    """Tag a block as a price candidate when its text yields a number."""
    parsed = parse_price_detail(block.get("text", ""))
    if parsed is None:
        return NameCandidate(block)
    return PriceCandidate(block, parsed.value, parsed)


def kansuji_to_int(kansuji: str) -> Optional[int]:
    """Read a kanji numeral, positionally or with 十/百/千 multipliers."""
    if not kansuji:
        return None
    if not any(ch in PLACE_VALUE_UNITS for ch in kansuji):
        digits = "".join(to_ascii_digit(ch) for ch in kansuji)
        if len(digits) != len(kansuji):
            return None
        return int(digits)

    total = 0
    current = 0
    for ch in kansuji:
        unit = PLACE_VALUE_UNITS.get(ch)
        if unit is not None:
            total += (current or 1) * unit
            current = 0
            continue
        digit = to_ascii_digit(ch)
        if not digit:
            return None
        current = current * 10 + int(digit)
    return total + current


class MenuLine(NamedTuple):
    name: str
    price: Optional[int]
    needs_review: bool
    confidence: float


def split_trailing_price(raw: str) -> Tuple[str, Optional[int]]:
    """Return ``(name, price)`` for text ending in a price, else ``(name, None)``.

    Unlike :func:`parse_price_from_raw`, the price must close the text and
    kanji runs carrying 十/百/千 are read by place value.
    """
    trimmed = (raw or "").strip()
    match = _TRAILING_PRICE_RE.search(trimmed)
    if not match:
        return normalize_name(trimmed), None
    price = kansuji_to_int(normalize_price_text(match.group(1)))
    if price is None:
        return normalize_name(trimmed), None
    return normalize_name(trimmed[: match.start()]), price


def parse_menu_line(raw: str) -> MenuLine:
    """Split a horizontal menu line such as ``"砂肝　３５０円"`` into name and price."""
    trimmed = (raw or "").strip()
    if not trimmed:
        return MenuLine(name="", price=None, needs_review=True, confidence=0.0)

    name, price = split_trailing_price(trimmed)
    if price is None:
        return MenuLine(name=name, price=None, needs_review=True, confidence=0.3)

    needs_review = len(name) < 2
    return MenuLine(
        name=name or trimmed,
        price=price,
        needs_review=needs_review,
        confidence=0.5 if needs_review else 0.9,
    )


__all__ = [
    "KANJI_DIGITS",
    "FULL_WIDTH_DIGITS",
    "CURRENCY_SUFFIXES",
    "MenuLine",
    "classify_block",
    "kansuji_to_int",
    "parse_menu_line",
    "parse_price_detail",
    "parse_price_from_raw",
    "split_trailing_price",
    "to_ascii_digit",
]
