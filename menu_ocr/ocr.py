"""Google Cloud Vision adapter producing word-level OCR blocks."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from google.api_core import exceptions as google_exceptions
from google.cloud import vision

from .geometry import polygon_to_bbox
from .types import OcrBlock, OcrPage

logger = logging.getLogger(__name__)

# Vision omits symbol confidence on some responses.
DEFAULT_WORD_CONFIDENCE = 0.9


class OcrError(Exception):
    """Raised when the vision backend cannot return a usable annotation."""


def _word_text_and_confidence(word: Any) -> Tuple[str, float]:
    symbols: Iterable[Any] = getattr(word, "symbols", None) or []
    parts: List[str] = []
    scores: List[float] = []
    for symbol in symbols:
        parts.append(str(getattr(symbol, "text", "") or ""))
        score = getattr(symbol, "confidence", None)
        if isinstance(score, (int, float)):
            scores.append(float(score))
    confidence = sum(scores) / len(scores) if scores else DEFAULT_WORD_CONFIDENCE
    return "".join(parts).strip(), confidence


def _vertices(bounding_box: Any) -> List[Tuple[float, float]]:
    vertices: Iterable[Any] = getattr(bounding_box, "vertices", None) or []
    return [
        (float(getattr(vertex, "x", 0) or 0), float(getattr(vertex, "y", 0) or 0))
        for vertex in vertices
    ]


def normalize_vision_response(response: Any) -> Optional[OcrPage]:
    """Flatten the first annotated page into word-level blocks.

    Each Vision word becomes its own block; vertical menus are reassembled
    later by :func:`menu_ocr.merging.merge_vertical_words`. Returns ``None``
    when the response carries no page.
    """
    annotation: Any = getattr(response, "full_text_annotation", None)
    pages: Sequence[Any] = list(getattr(annotation, "pages", None) or [])
    if not pages:
        return None
    page = pages[0]

    blocks: List[OcrBlock] = []
    for block in getattr(page, "blocks", None) or []:
        for paragraph in getattr(block, "paragraphs", None) or []:
            for word in getattr(paragraph, "words", None) or []:
                vertices = _vertices(getattr(word, "bounding_box", None))
                if not vertices:
                    continue
                text, confidence = _word_text_and_confidence(word)
                if not text:
                    continue
                blocks.append(
                    {
                        "text": text,
                        "bbox": polygon_to_bbox(vertices),
                        "words": [],
                        "confidence": confidence,
                    }
                )
    logger.debug("Vision response flattened into %d word blocks", len(blocks))
    return {
        "width": float(getattr(page, "width", 0) or 0),
        "height": float(getattr(page, "height", 0) or 0),
        "blocks": blocks,
    }


def document_ocr(image_bytes: bytes, language_hints: Optional[Sequence[str]] = None) -> Tuple[OcrPage, Any]:
    """Run Vision document text detection on ``image_bytes``.

    Returns ``(page, raw_response)``. An image without text yields a page
    with no blocks; transport or API failures raise :class:`OcrError`.
    """
    client = vision.ImageAnnotatorClient()
    image = vision.Image(content=image_bytes)
    image_context = vision.ImageContext(language_hints=list(language_hints or ["ja"]))
    try:
        response: Any = client.document_text_detection(image=image, image_context=image_context)
    except google_exceptions.GoogleAPIError as exc:
        raise OcrError(f"Vision request failed: {exc}") from exc

    error = getattr(response, "error", None)
    message = getattr(error, "message", "") if error is not None else ""
    if message:
        raise OcrError(f"Vision returned an error: {message}")

    page = normalize_vision_response(response)
    if page is None:
        logger.info("Vision OCR returned no pages")
        page = {"width": 0.0, "height": 0.0, "blocks": []}
    return page, response


__all__ = ["OcrError", "document_ocr", "normalize_vision_response"]
