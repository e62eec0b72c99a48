"""FastAPI server wrapping OCR and the menu parsing engine."""

from __future__ import annotations

import base64
import binascii
import io
import logging
import os
from typing import Any, Dict, List, Optional

import requests
import uvicorn
from fastapi import FastAPI, HTTPException
from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

from .config import ParseMenuOptions
from .logging_config import configure_logging
from .ocr import OcrError, document_ocr
from .pipeline import parse_menu_image_to_items
from .types import OcrBlock, OcrPage

logger = logging.getLogger(__name__)

app: FastAPI = FastAPI(title="Menu OCR API", version="0.1.0")

# Resolved once so a bad MENU_OCR_* value fails at startup.
DEFAULT_OPTIONS: ParseMenuOptions = ParseMenuOptions.from_env()


def _default_options() -> ParseMenuOptions:
    return DEFAULT_OPTIONS.model_copy(deep=True)


class BBoxModel(BaseModel):
    x: float
    y: float
    width: float
    height: float


class WordModel(BaseModel):
    text: str
    bbox: BBoxModel
    confidence: Optional[float] = None


class BlockModel(BaseModel):
    text: str
    bbox: BBoxModel
    words: List[WordModel] = Field(default_factory=list)
    confidence: Optional[float] = None


class ParseMenuRequest(BaseModel):
    image_url: Optional[str] = None
    image_b64: Optional[str] = None
    options: ParseMenuOptions = Field(default_factory=_default_options)

    def load_bytes(self) -> bytes:
        if self.image_b64:
            try:
                _, data = self.image_b64.split(",", 1)
            except ValueError:
                data = self.image_b64
            try:
                return base64.b64decode(data)
            except (binascii.Error, ValueError):
                raise HTTPException(status_code=400, detail="image_b64 is not valid base64")
        if self.image_url:
            logger.info("Fetching image from %s", self.image_url)
            try:
                response = requests.get(self.image_url, timeout=20)
            except requests.RequestException as exc:
                logger.warning("Image fetch failed: %s", exc)
                raise HTTPException(status_code=502, detail="Failed to fetch image URL")
            if not response.ok:
                raise HTTPException(status_code=502, detail="Failed to fetch image URL")
            return response.content
        raise HTTPException(status_code=400, detail="Provide image_url or image_b64")


class ParseBlocksRequest(BaseModel):
    blocks: List[BlockModel]
    width: Optional[float] = Field(default=None, ge=0)
    height: Optional[float] = Field(default=None, ge=0)
    options: ParseMenuOptions = Field(default_factory=_default_options)


def _image_size(image_bytes: bytes) -> Dict[str, int]:
    try:
        with Image.open(io.BytesIO(image_bytes)) as im:
            width, height = im.size
    except UnidentifiedImageError:
        raise HTTPException(status_code=400, detail="Unsupported or corrupt image")
    return {"w": width, "h": height}


@app.post("/parse-menu")
def parse_menu(req: ParseMenuRequest) -> Dict[str, Any]:
    image_bytes = req.load_bytes()
    size = _image_size(image_bytes)
    try:
        page, _ = document_ocr(image_bytes, language_hints=req.options.language_hints)
    except OcrError as exc:
        logger.error("OCR failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))

    if not page["width"] or not page["height"]:
        page = {"width": float(size["w"]), "height": float(size["h"]), "blocks": page["blocks"]}
    # Vision hands back single words; vertical strings must be re-joined.
    options = req.options.model_copy(update={"merge_vertical_words": True})
    items = parse_menu_image_to_items(page, options)
    return {"ocr_image_size": size, "items": items}


@app.post("/parse-blocks")
def parse_blocks(req: ParseBlocksRequest) -> Dict[str, Any]:
    blocks: List[OcrBlock] = [
        block.model_dump(exclude_none=True)  # type: ignore[misc]
        for block in req.blocks
    ]
    page: OcrPage = {"width": req.width or 0.0, "height": req.height or 0.0, "blocks": blocks}
    items = parse_menu_image_to_items(page, req.options)
    return {"items": items}


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


def run() -> None:
    """Console entry point: configure logging and serve the API with uvicorn."""
    configure_logging()
    uvicorn.run(
        app,
        host=os.getenv("MENU_OCR_HOST", "127.0.0.1"),
        port=int(os.getenv("MENU_OCR_PORT", "8000")),
        log_config=None,
    )
