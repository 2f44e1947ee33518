"""Shared utilities for PathHound CLI commands."""

from .rich_output import RichOutputFormatter, format_stats
from .validation import validate_path

__all__ = [
    "RichOutputFormatter",
    "format_stats",
    "validate_path",
]
