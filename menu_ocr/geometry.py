"""Bounding-box helpers shared by the layout modules."""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from .types import BBox, OcrBlock

_BBOX_KEYS = ("x", "y", "width", "height")


def is_valid_bbox(bbox: Any) -> bool:
    """True when every coordinate is a finite, non-negative number."""
    if not isinstance(bbox, Mapping):
        return False
    for key in _BBOX_KEYS:
        value = bbox.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value) or value < 0:
            return False
    return True


def has_valid_bbox(block: OcrBlock) -> bool:
    return is_valid_bbox(block.get("bbox"))


def center_x(block: OcrBlock) -> float:
    bbox = block["bbox"]
    return bbox["x"] + bbox["width"] / 2.0


def center_y(block: OcrBlock) -> float:
    bbox = block["bbox"]
    return bbox["y"] + bbox["height"] / 2.0


def right_edge(block: OcrBlock) -> float:
    bbox = block["bbox"]
    return bbox["x"] + bbox["width"]


def bottom_edge(block: OcrBlock) -> float:
    bbox = block["bbox"]
    return bbox["y"] + bbox["height"]


def union_bbox(boxes: Sequence[BBox]) -> BBox:
    x0 = min(b["x"] for b in boxes)
    y0 = min(b["y"] for b in boxes)
    x1 = max(b["x"] + b["width"] for b in boxes)
    y1 = max(b["y"] + b["height"] for b in boxes)
    return {"x": x0, "y": y0, "width": x1 - x0, "height": y1 - y0}


def polygon_to_bbox(vertices: Sequence[Sequence[float]]) -> BBox:
    """Convert a vertex list (as returned by Vision) into an ``x/y/width/height`` box."""
    if not vertices:
        return {"x": 0.0, "y": 0.0, "width": 0.0, "height": 0.0}
    xs = [float(v[0]) for v in vertices]
    ys = [float(v[1]) for v in vertices]
    x0, y0 = min(xs), min(ys)
    return {"x": x0, "y": y0, "width": max(xs) - x0, "height": max(ys) - y0}


__all__ = [
    "is_valid_bbox",
    "has_valid_bbox",
    "center_x",
    "center_y",
    "right_edge",
    "bottom_edge",
    "union_bbox",
    "polygon_to_bbox",
]
