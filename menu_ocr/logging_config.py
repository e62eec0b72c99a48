"""Logging configuration for the menu OCR server."""

from __future__ import annotations

import logging.config
import os
from pathlib import Path
from typing import Any, Dict

_logging_configured = False

_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 5


def _rotating(formatter: str, path: Path) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": formatter,
        "filename": str(path),
        "maxBytes": _MAX_BYTES,
        "backupCount": _BACKUP_COUNT,
        "encoding": "utf-8",
        "delay": True,
    }


def build_logging_config() -> Dict[str, Any]:
    """Return a ``dictConfig`` mapping driven by ``MENU_OCR_LOG_*`` variables."""
    log_dir = Path(os.getenv("MENU_OCR_LOG_DIR", "logs"))
    log_level = os.getenv("MENU_OCR_LOG_LEVEL", "INFO").upper()
    log_path = log_dir / os.getenv("MENU_OCR_LOG_FILE", "menu-ocr.log")
    access_log_path = log_dir / os.getenv("MENU_OCR_ACCESS_LOG_FILE", "menu-ocr-access.log")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(levelprefix)s %(name)s: %(message)s",
                "use_colors": None,
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": "%(levelprefix)s %(client_addr)s - \"%(request_line)s\" %(status_code)s",
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
            "file": _rotating("default", log_path),
            "access_stream": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
            },
            "access_file": _rotating("access", access_log_path),
        },
        "loggers": {
            "menu_ocr": {
                "handlers": ["default", "file"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn": {
                "handlers": ["default", "file"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": ["default", "file"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["access_stream", "access_file"],
                "level": log_level,
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["default", "file"],
            "level": log_level,
        },
    }


def configure_logging() -> None:
    """Install stream and rotating file handlers once per process."""
    global _logging_configured
    if _logging_configured:
        return

    config = build_logging_config()
    Path(config["handlers"]["file"]["filename"]).parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(config)
    _logging_configured = True


__all__ = ["build_logging_config", "configure_logging"]
