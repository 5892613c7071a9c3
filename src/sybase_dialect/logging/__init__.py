"""Logging infrastructure for sybase_dialect.

This module provides structured logging with JSON output, context tracking,
and OpenTelemetry trace correlation.
"""

from sybase_dialect.logging.filters import (
    ContextFilter,
    clear_request_context,
    connection_context,
    set_request_context,
)
from sybase_dialect.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "set_request_context",
    "clear_request_context",
    "connection_context",
]
