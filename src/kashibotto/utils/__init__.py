"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import validate_title, validate_artist, validate_text
from .retry import RetryPolicy

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_title",
    "validate_artist",
    "validate_text",
    "RetryPolicy",
]
