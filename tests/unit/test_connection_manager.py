"""Unit tests for the pooled ODBC connection layer."""

import threading
from unittest.mock import MagicMock

import pytest

pyodbc = pytest.importorskip("pyodbc")

from sybase_dialect.common.exceptions import DatabaseConnectionError, QueryExecutionError  # noqa: E402
from sybase_dialect.connection import ConnectionHandle, ConnectionManager  # noqa: E402
from sybase_dialect.constants.data_types import DataTypeTag  # noqa: E402
from sybase_dialect.logging.filters import connection_id_var  # noqa: E402
from sybase_dialect.settings import ConnectionSettings  # noqa: E402
from sybase_dialect.types.parsers import TypeParserRegistry  # noqa: E402


def _fake_connection(description=None, rows=None, rowcount=1):
    cursor = MagicMock()
    cursor.description = description
    cursor.fetchall.return_value = rows or []
    cursor.rowcount = rowcount
    cursor.nextset.return_value = False
    connection = MagicMock()
    connection.cursor.return_value = cursor
    return connection, cursor


@pytest.fixture
def connection_settings():
    return ConnectionSettings(host="db", username="dba", password="sql", max_retries=2, retry_delay_seconds=0.1)


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr("sybase_dialect.utils.decorators.time.sleep", sleeps.append)
    return sleeps


class TestConnectionHandle:

    def test_execute_returns_rowcount(self):
        connection, cursor = _fake_connection(rowcount=3)
        handle = ConnectionHandle(connection, TypeParserRegistry())

        assert handle.execute('DELETE FROM "t";') == 3
        cursor.execute.assert_called_once_with('DELETE FROM "t";')
        cursor.close.assert_called_once()

    def test_empty_sql_is_not_sent(self):
        connection, cursor = _fake_connection()
        handle = ConnectionHandle(connection, TypeParserRegistry())

        assert handle.execute("") == 0
        cursor.execute.assert_not_called()

    def test_lock_held_during_execution(self):
        connection, cursor = _fake_connection()
        handle = ConnectionHandle(connection, TypeParserRegistry())
        observed = []
        cursor.execute.side_effect = lambda sql: observed.append(handle._lock.locked())

        handle.execute("SELECT 1;")

        assert observed == [True]
        assert not handle._lock.locked()

    def test_concurrent_statements_are_serialized(self):
        connection, cursor = _fake_connection()
        handle = ConnectionHandle(connection, TypeParserRegistry())
        active = []
        overlaps = []

        def run(sql):
            active.append(sql)
            if len(active) > 1:
                overlaps.append(sql)
            active.remove(sql)

        cursor.execute.side_effect = run
        threads = [threading.Thread(target=handle.execute, args=(f"SELECT {i};",)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlaps == []
        assert cursor.execute.call_count == 8

    def test_fetch_all_applies_parsers(self):
        connection, cursor = _fake_connection(
            description=[("id",), ("active",)],
            rows=[(1, 1), (2, 0)],
        )
        handle = ConnectionHandle(connection, TypeParserRegistry.with_builtins())

        rows = handle.fetch_all('SELECT "id", "active" FROM "t";', column_types={"active": DataTypeTag.BOOLEAN})

        assert rows == [{"id": 1, "active": True}, {"id": 2, "active": False}]

    def test_fetch_skips_to_result_set(self):
        connection, cursor = _fake_connection(rows=[(4,)])
        cursor.nextset.side_effect = lambda: setattr(cursor, "description", [("AFFECTEDROWS",)]) or True

        rows = ConnectionHandle(connection, TypeParserRegistry()).fetch_all(
            'DELETE TOP(1) FROM "t"; SELECT @@ROWCOUNT AS AFFECTEDROWS;'
        )

        assert rows == [{"AFFECTEDROWS": 4}]

    def test_fetch_dataframe(self):
        connection, _ = _fake_connection(description=[("a",), ("b",)], rows=[(1, "x"), (2, "y")])

        frame = ConnectionHandle(connection, TypeParserRegistry()).fetch_dataframe("SELECT 1;")

        assert list(frame.columns) == ["a", "b"]
        assert frame["b"].tolist() == ["x", "y"]

    def test_driver_error_wrapped(self):
        connection, cursor = _fake_connection()
        cursor.execute.side_effect = pyodbc.ProgrammingError("42S02", "table not found")

        with pytest.raises(QueryExecutionError) as exc_info:
            ConnectionHandle(connection, TypeParserRegistry()).execute('SELECT * FROM "missing";')

        assert exc_info.value.details["query"] == 'SELECT * FROM "missing";'
        cursor.close.assert_called_once()

    def test_cursor_failure_wrapped(self):
        connection, _ = _fake_connection()
        connection.cursor.side_effect = pyodbc.OperationalError("08S01", "link failure")

        with pytest.raises(QueryExecutionError):
            ConnectionHandle(connection, TypeParserRegistry()).execute("SELECT 1;")

    def test_connection_id_scoped_to_statement(self):
        connection, cursor = _fake_connection()
        handle = ConnectionHandle(connection, TypeParserRegistry())
        seen = []
        cursor.execute.side_effect = lambda sql: seen.append(connection_id_var.get())

        handle.execute("SELECT 1;")

        assert seen == [handle.connection_id]
        assert connection_id_var.get() is None

    def test_connection_id_restored_after_failure(self):
        connection, cursor = _fake_connection()
        cursor.execute.side_effect = pyodbc.ProgrammingError("42000", "syntax error")
        token = connection_id_var.set("outer")
        try:
            with pytest.raises(QueryExecutionError):
                ConnectionHandle(connection, TypeParserRegistry()).execute("SELEC 1;")
            assert connection_id_var.get() == "outer"
        finally:
            connection_id_var.reset(token)


class TestConnectionManager:
    """Pool checkout, retries and validation."""

    def test_connect_uses_odbc_string(self, monkeypatch, connection_settings):
        connection, _ = _fake_connection()
        connect = MagicMock(return_value=connection)
        monkeypatch.setattr("sybase_dialect.connection.manager.pyodbc.connect", connect)

        manager = ConnectionManager(connection_settings)
        handle = manager.connect()

        assert isinstance(handle, ConnectionHandle)
        connect.assert_called_once_with(
            "DRIVER={SQL Anywhere 17};HOST=db:2638;UID=dba;PWD=sql",
            timeout=15,
            autocommit=True,
        )
        manager.dispose()

    def test_transient_failures_are_retried(self, monkeypatch, connection_settings, no_sleep):
        connect = MagicMock(side_effect=pyodbc.OperationalError("08001", "server not found"))
        monkeypatch.setattr("sybase_dialect.connection.manager.pyodbc.connect", connect)

        with pytest.raises(DatabaseConnectionError) as exc_info:
            ConnectionManager(connection_settings).connect()

        assert connect.call_count == 3
        assert no_sleep == [0.1, 0.2]
        assert exc_info.value.is_retryable
        assert exc_info.value.details == {"host": "db", "port": 2638}

    def test_non_transient_failure_is_not_retried(self, monkeypatch, connection_settings, no_sleep):
        connect = MagicMock(side_effect=pyodbc.InterfaceError("28000", "login failed"))
        monkeypatch.setattr("sybase_dialect.connection.manager.pyodbc.connect", connect)

        with pytest.raises(DatabaseConnectionError) as exc_info:
            ConnectionManager(connection_settings).connect()

        assert connect.call_count == 1
        assert no_sleep == []
        assert not exc_info.value.is_retryable

    def test_validate_and_disconnect(self, monkeypatch, connection_settings):
        connection, cursor = _fake_connection(description=[("1",)], rows=[(1,)])
        monkeypatch.setattr("sybase_dialect.connection.manager.pyodbc.connect", MagicMock(return_value=connection))
        manager = ConnectionManager(connection_settings)
        handle = manager.connect()

        assert manager.validate(handle)

        manager.disconnect(handle)
        manager.disconnect(handle)

        assert handle.closed
        assert not manager.validate(handle)
        manager.dispose()

    def test_validate_false_when_query_fails(self):
        connection, cursor = _fake_connection()
        cursor.execute.side_effect = pyodbc.OperationalError("08S01", "link failure")
        manager = ConnectionManager(ConnectionSettings())

        assert not manager.validate(ConnectionHandle(connection, manager.parsers))

    def test_validate_false_when_link_is_down(self):
        connection, _ = _fake_connection()
        connection.cursor.side_effect = pyodbc.OperationalError("08S01", "link failure")
        manager = ConnectionManager(ConnectionSettings())

        assert manager.validate(ConnectionHandle(connection, manager.parsers)) is False

    def test_closed_handle_rejects_statements(self):
        connection, _ = _fake_connection()
        handle = ConnectionHandle(connection, TypeParserRegistry())
        handle.close()

        with pytest.raises(DatabaseConnectionError):
            handle.execute("SELECT 1;")

    def test_type_parser_management(self):
        manager = ConnectionManager(ConnectionSettings(), parser_registry=TypeParserRegistry.with_builtins())
        manager.parsers.register(DataTypeTag.BOOLEAN, str)

        manager.refresh_type_parsers([DataTypeTag.BOOLEAN])
        assert manager.parsers.parse(DataTypeTag.BOOLEAN, 1) is True

        manager.clear_type_parsers()
        assert len(manager.parsers) == 0
