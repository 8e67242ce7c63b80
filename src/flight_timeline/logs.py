"""Logging setup for the flight_timeline logger hierarchy."""

from __future__ import annotations

import logging

LOGGER_NAME = "flight_timeline"
LOG_FORMAT = "%(asctime)s | %(name)-10s | %(levelname)-8s | %(message)s"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    if not any(getattr(handler, "_flight_timeline", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._flight_timeline = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
