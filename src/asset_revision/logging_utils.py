"""Logging helpers for asset revision."""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV = "ASSET_REVISION_LOG_LEVEL"


def resolve_level(level: int | str | None = None) -> int:
    raw = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    if raw is None or raw == "":
        return logging.INFO
    if isinstance(raw, int):
        return raw
    text = str(raw).strip().upper()
    if text.isdigit():
        return int(text)
    resolved = logging.getLevelName(text)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: int | str | None = None, log_path: str | None = None) -> None:
    """Install a stream handler (and optional file handler) unless logging is already configured."""
    root = logging.getLogger()
    if root.handlers:
        return
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    logging.basicConfig(
        level=resolve_level(level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )
