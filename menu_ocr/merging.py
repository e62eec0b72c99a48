"""Join word-level OCR fragments that belong to one vertical string."""

from __future__ import annotations

import logging
from collections import deque
from typing import List, Sequence

from .geometry import bottom_edge, center_x, has_valid_bbox, union_bbox
from .types import OcrBlock, OcrWord

logger = logging.getLogger(__name__)


def _vertical_gap(upper: OcrBlock, lower: OcrBlock) -> float:
    return lower["bbox"]["y"] - bottom_edge(upper)


def _stacked(
    a: OcrBlock,
    b: OcrBlock,
    max_x_distance: float,
    max_y_gap: float,
    max_overlap: float,
) -> bool:
    if abs(center_x(a) - center_x(b)) >= max_x_distance:
        return False
    upper, lower = (a, b) if a["bbox"]["y"] <= b["bbox"]["y"] else (b, a)
    gap = _vertical_gap(upper, lower)
    return -max_overlap <= gap <= max_y_gap


def _neighbors(
    blocks: Sequence[OcrBlock],
    max_x_distance: float,
    max_y_gap: float,
    max_overlap: float,
) -> List[List[int]]:
    adjacency: List[List[int]] = [[] for _ in blocks]
    for i in range(len(blocks)):
        for j in range(i + 1, len(blocks)):
            if _stacked(blocks[i], blocks[j], max_x_distance, max_y_gap, max_overlap):
                adjacency[i].append(j)
                adjacency[j].append(i)
    return adjacency


def _connected_components(adjacency: List[List[int]]) -> List[List[int]]:
    seen: set[int] = set()
    components: List[List[int]] = []
    for start in range(len(adjacency)):
        if start in seen:
            continue
        queue: deque[int] = deque([start])
        comp: List[int] = []
        while queue:
            node = queue.popleft()
            if node in seen:
                continue
            seen.add(node)
            comp.append(node)
            queue.extend(adjacency[node])
        components.append(sorted(comp))
    return components


def _merge_component(parts: List[OcrBlock]) -> OcrBlock:
    if len(parts) == 1:
        return parts[0]
    parts = sorted(parts, key=lambda b: (b["bbox"]["y"], b["bbox"]["x"]))
    words: List[OcrWord] = []
    for part in parts:
        if part.get("words"):
            words.extend(part["words"])
        else:
            word: OcrWord = {"text": part["text"], "bbox": part["bbox"]}
            if "confidence" in part:
                word["confidence"] = part["confidence"]
            words.append(word)
    merged: OcrBlock = {
        "text": "".join(part["text"] for part in parts),
        "bbox": union_bbox([part["bbox"] for part in parts]),
        "words": words,
    }
    confidences = [part["confidence"] for part in parts if "confidence" in part]
    if confidences:
        merged["confidence"] = sum(confidences) / len(confidences)
    return merged


def merge_vertical_words(
    blocks: Sequence[OcrBlock],
    max_x_distance: float = 15.0,
    max_y_gap: float = 15.0,
    max_overlap: float = 5.0,
) -> List[OcrBlock]:
    """Merge fragments stacked in the same vertical line into single blocks.

    Two fragments are linked when their horizontal centers are closer than
    ``max_x_distance`` and the lower one starts between ``max_overlap``
    pixels above and ``max_y_gap`` pixels below the upper one's bottom edge.
    Every connected chain becomes one block whose text reads top to bottom.
    Blocks without a usable bbox are passed through untouched.
    """
    usable = [block for block in blocks if has_valid_bbox(block)]
    passthrough = [block for block in blocks if not has_valid_bbox(block)]
    if not usable:
        return list(passthrough)

    ordered = sorted(usable, key=lambda b: (b["bbox"]["y"], b["bbox"]["x"]))
    adjacency = _neighbors(ordered, max_x_distance, max_y_gap, max_overlap)
    components = _connected_components(adjacency)
    merged = [_merge_component([ordered[i] for i in comp]) for comp in components]
    logger.debug("Vertical merge: %d words -> %d blocks", len(usable), len(merged))
    return merged + passthrough


__all__ = ["merge_vertical_words"]
