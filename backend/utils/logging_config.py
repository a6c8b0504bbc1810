"""
Loguru configuration

Example:
    >>> from utils.logging_config import configure_logging
    >>> configure_logging(level="DEBUG")
"""

import sys
from typing import Optional, TextIO

from loguru import logger

VALID_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None, colorize: bool = True) -> None:
    """Replace loguru's default handler with a single console sink.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Destination stream (default: stderr)
        colorize: Enable colored output
    """
    level_upper = level.upper()
    if level_upper not in VALID_LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of {VALID_LEVELS}")

    logger.remove()
    logger.add(
        stream or sys.stderr,
        level=level_upper,
        format=CONSOLE_FORMAT,
        colorize=colorize,
        backtrace=True,
        diagnose=False,
    )
    logger.debug(f"Logging configured at {level_upper}")
