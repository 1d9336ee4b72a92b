"""Logging configuration shared by the app shell and the services."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.settings import LOGGING

ROOT_LOGGER = "taskapp"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    path: Optional[Path] = None,
    *,
    level: Optional[int] = None,
    console: bool = True,
) -> logging.Logger:
    """Attach a rotating file handler (and optionally stderr) to ``taskapp``.

    Calling it again only adjusts the level.
    """

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level if level is not None else LOGGING.level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    target = Path(path or LOGGING.path)
    target.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        target,
        maxBytes=LOGGING.max_bytes,
        backupCount=LOGGING.backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        logger.addHandler(stream)
    return logger


__all__ = ["LOG_FORMAT", "ROOT_LOGGER", "setup_logging"]
