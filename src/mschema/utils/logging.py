"""Logging helpers for mschema."""

from __future__ import annotations

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT_LOGGER_NAME = "mschema"


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Logger name (usually ``__name__``)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_logging(
    level: str = "INFO",
    fmt: Optional[str] = None,
    stream=None,
) -> logging.Logger:
    """Configure the package logger.

    Calling this more than once replaces the previously installed handler.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        fmt: Optional log format string
        stream: Output stream (defaults to stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
