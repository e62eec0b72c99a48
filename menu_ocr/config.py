"""Parse options for the menu engine, validated up front."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .confidence import DEFAULT_REVIEW_THRESHOLD

DEFAULT_MAX_COLUMNS = 10
DEFAULT_MAX_COLUMN_GAP = 48.0


class ParseMenuOptions(BaseModel):
    """Caller-supplied configuration; invalid values fail before parsing starts."""

    language_hints: List[str] = Field(default_factory=lambda: ["ja"])
    max_columns: int = Field(default=DEFAULT_MAX_COLUMNS, gt=0)
    max_column_gap: float = Field(default=DEFAULT_MAX_COLUMN_GAP, ge=0)
    max_match_distance: Optional[float] = Field(default=None, gt=0)
    right_to_left: bool = True
    assignment: Literal["greedy", "optimal"] = "greedy"
    merge_vertical_words: bool = False
    filter_noise: bool = True
    split_inline_items: bool = True
    review_threshold: float = Field(default=DEFAULT_REVIEW_THRESHOLD, ge=0, le=1)

    @classmethod
    def from_env(cls) -> "ParseMenuOptions":
        """Build options from ``MENU_OCR_*`` environment variables."""
        values: Dict[str, Any] = {}
        hints = os.getenv("MENU_OCR_LANGUAGE_HINTS")
        if hints:
            values["language_hints"] = [h.strip() for h in hints.split(",") if h.strip()]
        for key, env_name in (
            ("max_columns", "MENU_OCR_MAX_COLUMNS"),
            ("max_column_gap", "MENU_OCR_MAX_COLUMN_GAP"),
            ("max_match_distance", "MENU_OCR_MAX_MATCH_DISTANCE"),
            ("assignment", "MENU_OCR_ASSIGNMENT"),
            ("review_threshold", "MENU_OCR_REVIEW_THRESHOLD"),
        ):
            raw = os.getenv(env_name)
            if raw:
                values[key] = raw
        reading = os.getenv("MENU_OCR_READING_ORDER")
        if reading:
            values["right_to_left"] = reading.lower() != "ltr"
        return cls(**values)


__all__ = ["DEFAULT_MAX_COLUMNS", "DEFAULT_MAX_COLUMN_GAP", "ParseMenuOptions"]
