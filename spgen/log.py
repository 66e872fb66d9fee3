"""
Logging setup.

The package logs through loguru but stays silent until an application
opts in with setup_logging(). Passwords are never passed to the logger.
"""

from __future__ import annotations

import os
import sys

from loguru import logger

from .config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV

_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - {message}"
)


def setup_logging(level: str | None = None) -> None:
    """
    Enable spgen log records and send them to stderr.

    Level resolution: explicit argument, then SPGEN_LOG_LEVEL, then WARNING.
    """
    resolved = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()

    logger.remove()
    logger.add(sys.stderr, level=resolved, format=_LOG_FORMAT)
    logger.enable("spgen")
