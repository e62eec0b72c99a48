"""Menu OCR backend: rebuild (dish, price) pairs from OCR text blocks."""

from fastapi import FastAPI

from .config import ParseMenuOptions
from .main import app as _app
from .pipeline import parse_menu_image_to_items

app: FastAPI = _app

__all__ = ["app", "ParseMenuOptions", "parse_menu_image_to_items"]
