import json
import logging

from sybase_dialect.__version__ import __version__
from sybase_dialect.logging.filters import (
    ContextFilter,
    clear_request_context,
    connection_context,
    set_request_context,
)
from sybase_dialect.logging.logger import CustomJsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="built %s",
        args=("SELECT",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_filter_adds_sdk_fields():
    record = _record()
    assert ContextFilter().filter(record)
    assert record.sdk_name == "sybase_dialect"
    assert record.sdk_version == __version__


def test_context_filter_uses_request_context():
    set_request_context(request_id="req-1", connection_id="conn-7")
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert record.request_id == "req-1"
        assert record.connection_id == "conn-7"
    finally:
        clear_request_context()


def test_context_filter_no_context_is_graceful():
    clear_request_context()
    record = _record()
    assert ContextFilter().filter(record)
    assert record.request_id is None
    assert record.connection_id is None


def test_connection_context_restores_previous_id():
    set_request_context(connection_id="outer")
    try:
        with connection_context("inner"):
            record = _record()
            ContextFilter().filter(record)
            assert record.connection_id == "inner"
        record = _record()
        ContextFilter().filter(record)
        assert record.connection_id == "outer"
    finally:
        clear_request_context()


def test_json_formatter_includes_extra_fields():
    record = _record(table="users", operation_type="SELECT")

    payload = json.loads(CustomJsonFormatter().format(record))

    assert payload["message"] == "built SELECT"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["table"] == "users"
    assert payload["operation_type"] == "SELECT"
    assert "trace_id" not in payload


def test_setup_logging_installs_json_handler():
    from sybase_dialect.logging import setup_logging

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug")
        assert root.level == logging.DEBUG
        assert any(isinstance(h.formatter, CustomJsonFormatter) for h in root.handlers)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_defaults_to_settings_level(monkeypatch):
    from sybase_dialect.logging import setup_logging
    from sybase_dialect.settings.main import _reload_settings

    root = logging.getLogger()
    pool_logger = logging.getLogger("sqlalchemy.pool")
    saved_handlers, saved_level, saved_pool_level = root.handlers[:], root.level, pool_logger.level
    monkeypatch.setenv("LOG_LEVEL", "error")
    try:
        _reload_settings()
        setup_logging()
        assert root.level == logging.ERROR
        assert pool_logger.level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        pool_logger.setLevel(saved_pool_level)
        monkeypatch.undo()
        _reload_settings()
