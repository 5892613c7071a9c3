"""JSON log output for the generator and its connection layer.

Every record becomes one JSON object on stdout. Anything passed through
``extra`` (table names, operation types, statement durations) is kept as
a top-level key, and records emitted inside a traced statement carry the
OpenTelemetry trace and span ids.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

from opentelemetry import trace


def _standard_record_keys() -> Set[str]:
    blank = logging.LogRecord(
        name="sybase_dialect",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="",
        args=(),
        exc_info=None,
    )
    return set(blank.__dict__) | {"asctime", "message"}


_STANDARD_KEYS = _standard_record_keys()

# Pool checkout chatter drowns out statement logs at DEBUG
_QUIET_LOGGERS = ("sqlalchemy.pool", "opentelemetry")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class CustomJsonFormatter(logging.Formatter):
    """Render a record, its ``extra`` fields and the active span as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            key: value for key, value in record.__dict__.items() if key not in _STANDARD_KEYS
        }
        payload["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        payload["level"] = record.levelname
        payload["logger"] = record.name
        payload["message"] = record.getMessage()

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            payload["trace_id"] = format(span_context.trace_id, "032x")
            payload["span_id"] = format(span_context.span_id, "016x")

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Datetimes, Decimals and enums in extras fall back to str()
        return json.dumps(payload, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Send package and application logs to stdout as JSON.

    Args:
        level: Root log level. Defaults to ``log_level`` from the settings,
            which reads ``LOG_LEVEL``.
    """
    if level is None:
        from sybase_dialect.settings import get_settings

        level = get_settings().log_level
    level = level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "sybase_json": {"()": "sybase_dialect.logging.logger.CustomJsonFormatter"},
            },
            "filters": {
                "sybase_context": {"()": "sybase_dialect.logging.filters.ContextFilter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "sybase_json",
                    "filters": ["sybase_context"],
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            "root": {"level": level, "handlers": ["console"]},
        }
    )
