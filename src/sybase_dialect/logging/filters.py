"""Logging filters for context injection.

This module provides filters that inject context variables into log records,
enabling correlation of generated statements with the request that asked
for them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional
from sybase_dialect.__version__ import __version__

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
connection_id_var: ContextVar[Optional[str]] = ContextVar("connection_id", default=None)


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
        setattr(record, "connection_id", connection_id_var.get())
        setattr(record, "sdk_name", "sybase_dialect")
        setattr(record, "sdk_version", __version__)

        return True


def set_request_context(
    request_id: Optional[str] = None,
    connection_id: Optional[str] = None,
) -> None:
    """Set request context variables."""
    if request_id is not None:
        request_id_var.set(request_id)
    if connection_id is not None:
        connection_id_var.set(connection_id)


def clear_request_context() -> None:
    """Clear all request context variables."""
    request_id_var.set(None)
    connection_id_var.set(None)


@contextmanager
def connection_context(connection_id: str) -> Iterator[None]:
    """Tag log records with a connection id until the block exits.

    The previous value is restored on exit, so nested blocks and
    records logged after the statement see their own context.
    """
    token = connection_id_var.set(connection_id)
    try:
        yield
    finally:
        connection_id_var.reset(token)
