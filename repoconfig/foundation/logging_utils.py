"""Logging helpers that avoid heavy dependencies."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def configure_logger(name: str = "repoconfig", *, level: int = logging.INFO) -> logging.Logger:
    """Configure a named logger that writes to stderr, replacing earlier handlers."""

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(stream_handler)
    logger.propagate = False

    logger.debug("Logging initialized (logger=%s level=%s)", name, logging.getLevelName(level))
    return logger
