"""Logging filters for context injection.

This module provides filters that inject context variables into log records,
so every line emitted while reacting to a schema change carries the project
and collection it belongs to.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from autoindex.__version__ import __version__

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
project_var: ContextVar[Optional[str]] = ContextVar("project", default=None)
collection_var: ContextVar[Optional[str]] = ContextVar("collection", default=None)


class ContextFilter(logging.Filter):
    """Logging filter that adds context variables to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        setattr(record, "request_id", request_id_var.get())
        setattr(record, "project", project_var.get())
        setattr(record, "collection", collection_var.get())
        setattr(record, "sdk_name", "autoindex")
        setattr(record, "autoindex_version", __version__)

        return True


def set_request_context(
    request_id: Optional[str] = None,
    project: Optional[str] = None,
    collection: Optional[str] = None,
) -> None:
    """Set request context variables."""
    if request_id is not None:
        request_id_var.set(request_id)
    if project is not None:
        project_var.set(project)
    if collection is not None:
        collection_var.set(collection)


def clear_request_context() -> None:
    """Clear all request context variables."""
    request_id_var.set(None)
    project_var.set(None)
    collection_var.set(None)


@contextmanager
def schema_context(project: str, collection: str) -> Iterator[None]:
    """Scope log records to a single project/collection pair."""
    project_token = project_var.set(project)
    collection_token = collection_var.set(collection)
    try:
        yield
    finally:
        collection_var.reset(collection_token)
        project_var.reset(project_token)
