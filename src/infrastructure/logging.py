from __future__ import annotations

import os
import sys

from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging() -> None:
    """Reset loguru sinks and log to stderr at LOG_LEVEL."""
    env = os.getenv("ENV", "development")
    logger.remove()
    logger.add(
        sys.stderr,
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=_FORMAT,
        colorize=env != "production",
        backtrace=env != "production",
        diagnose=env != "production",
    )
