"""Utilities - logging setup."""

from simple_error.utilities.logging import setup_logging

__all__ = [
    "setup_logging",
]
