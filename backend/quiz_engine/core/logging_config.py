"""Logging configuration helpers for the engine and its HTTP layer."""

from __future__ import annotations

import logging
from logging import Logger

from quiz_engine.core.config import settings


def configure_logging(level: str | None = None) -> Logger:
    """Configure basic logging for the application and return the package logger."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # SQL statements are controlled by SQL_ECHO, keep the engine logger quiet otherwise.
    if not settings.SQL_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return logging.getLogger("quiz_engine")
