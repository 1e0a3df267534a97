"""Logging setup for applications embedding simple_error.

The library itself only attaches a NullHandler; call setup_logging() to
see compile-phase messages on stderr.

Usage::

    from simple_error.utilities import setup_logging

    setup_logging("debug")
"""

import logging
import sys

from simple_error.config import get_log_level

LOGGER_NAME = "simple_error"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int | str | None = None, stream=None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Level name or number; defaults to the configured log_level
        stream: Output stream (default: stderr)

    Returns:
        The package logger
    """
    if level is None:
        level = get_log_level()
    elif isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)

    # Replace our own handler on repeated calls instead of stacking them
    for handler in list(logger.handlers):
        if getattr(handler, "_simple_error_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler._simple_error_handler = True
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
