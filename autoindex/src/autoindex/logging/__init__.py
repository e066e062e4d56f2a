"""Logging infrastructure for autoindex.

This module provides structured logging with JSON output and context
tracking.
"""

from autoindex.logging.filters import ContextFilter, schema_context
from autoindex.logging.logger import JsonLogFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "JsonLogFormatter",
    "ContextFilter",
    "schema_context",
]
