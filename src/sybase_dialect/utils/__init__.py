"""Utility decorators for tracing and retries."""

from sybase_dialect.utils.decorators import retry_with_backoff, traced

__all__ = [
    "retry_with_backoff",
    "traced",
]
