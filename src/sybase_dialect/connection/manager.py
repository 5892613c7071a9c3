"""ODBC connection management for SQL Anywhere.

The generator never touches a connection. This module is the thin driver
layer that runs its output: pyodbc connections handed out by a
SQLAlchemy ``QueuePool``, each wrapped in a ``ConnectionHandle`` that
serializes statement execution with a lock.
"""

import threading
import time
import uuid
from typing import Any, Dict, List, Optional

import pandas as pd
import pyodbc
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.pool import QueuePool

from sybase_dialect.common.exceptions import (
    DialectError,
    connection_error,
    query_execution_error,
)
from sybase_dialect.constants.data_types import DataTypeTag
from sybase_dialect.logging import connection_context, get_logger
from sybase_dialect.settings.connection import ConnectionSettings
from sybase_dialect.types.parsers import TypeParserRegistry
from sybase_dialect.utils.decorators import retry_with_backoff, traced

logger = get_logger(__name__)

_TRANSIENT_ERRORS = (pyodbc.OperationalError, PoolTimeoutError)


def _span_attributes(handle: "ConnectionHandle", sql: str, *args: Any, **kwargs: Any) -> Dict[str, Any]:
    statement = (sql or "").strip()
    if len(statement) > 4096:
        statement = f"{statement[:4093]}..."
    return {
        "db.system": "sqlanywhere",
        "db.statement": statement,
        "db.connection_id": handle.connection_id,
    }


class ConnectionHandle:
    """One pooled connection.

    Statements on a handle run one at a time; the caller owns
    transaction boundaries and sends them as generated SQL.
    """

    def __init__(self, connection: Any, parser_registry: TypeParserRegistry):
        self._connection = connection
        self._parsers = parser_registry
        self._lock = threading.Lock()
        self.connection_id = uuid.uuid4().hex[:12]
        self.closed = False

    def _require_open(self) -> None:
        if self.closed:
            raise connection_error(f"Connection {self.connection_id} is closed")

    def _run(self, sql: str, fetch: bool):
        self._require_open()
        start_time = time.time()
        with self._lock, connection_context(self.connection_id):
            cursor = None
            try:
                cursor = self._connection.cursor()
                cursor.execute(sql)
                # Multi-statement batches put the result set after the DML counts
                while fetch and cursor.description is None and cursor.nextset():
                    pass
                if not fetch:
                    return cursor.rowcount, None, None
                if cursor.description is None:
                    return cursor.rowcount, [], []
                columns = [column[0] for column in cursor.description]
                return cursor.rowcount, columns, cursor.fetchall()
            except pyodbc.Error as exc:
                logger.error(
                    "SQL statement failed",
                    extra={"duration.seconds": f"{time.time() - start_time:.6f}", "error": str(exc)},
                )
                raise query_execution_error(sql, exc) from exc
            finally:
                if cursor is not None:
                    cursor.close()
                logger.debug(
                    "SQL statement finished",
                    extra={"duration.seconds": f"{time.time() - start_time:.6f}"},
                )

    @traced(span_name="sybase_dialect.connection.execute", attribute_getter=_span_attributes)
    def execute(self, sql: str) -> int:
        """Run statements that return no rows.

        Returns:
            Driver row count of the last statement, or 0 for empty SQL
        """
        if not sql or not sql.strip():
            return 0
        rowcount, _, _ = self._run(sql, fetch=False)
        return rowcount

    @traced(span_name="sybase_dialect.connection.fetch_all", attribute_getter=_span_attributes)
    def fetch_all(
        self,
        sql: str,
        column_types: Optional[Dict[str, DataTypeTag]] = None,
    ) -> List[Dict[str, Any]]:
        """Run a query and return rows as dicts.

        Args:
            sql: Query text
            column_types: Column name to type tag; matching registry
                parsers are applied to those columns

        Returns:
            List of row dictionaries
        """
        _, columns, rows = self._run(sql, fetch=True)
        column_types = column_types or {}
        records = []
        for row in rows:
            record = {}
            for column, value in zip(columns, row):
                tag = column_types.get(column)
                record[column] = self._parsers.parse(tag, value) if tag is not None else value
            records.append(record)
        return records

    @traced(span_name="sybase_dialect.connection.fetch_dataframe", attribute_getter=_span_attributes)
    def fetch_dataframe(self, sql: str) -> pd.DataFrame:
        """Run a query and return the result as a pandas DataFrame."""
        _, columns, rows = self._run(sql, fetch=True)
        return pd.DataFrame.from_records([tuple(row) for row in rows], columns=columns)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._connection.close()


class ConnectionManager:
    """Pooled pyodbc connections to SQL Anywhere.

    Example:
        >>> manager = ConnectionManager(ConnectionSettings(host="db", username="dba"))
        >>> handle = manager.connect()
        >>> handle.execute(builder.build_query(CreateTable(...)))
        >>> manager.disconnect(handle)
        >>> manager.dispose()
    """

    def __init__(
        self,
        settings: Optional[ConnectionSettings] = None,
        parser_registry: Optional[TypeParserRegistry] = None,
    ):
        if settings is None:
            from sybase_dialect.settings import get_settings
            settings = get_settings().connection
        self.settings = settings
        self.parsers = parser_registry if parser_registry is not None else TypeParserRegistry.with_builtins()
        self._pool: Optional[QueuePool] = None

    @property
    def pool(self) -> QueuePool:
        if self._pool is None:
            self._pool = self._create_pool()
        return self._pool

    def _create_pool(self) -> QueuePool:
        # SQLAlchemy owns pooling
        pyodbc.pooling = False
        pool = QueuePool(
            self._raw_connect,
            pool_size=self.settings.pool_size,
            max_overflow=self.settings.max_overflow,
            timeout=self.settings.pool_timeout,
        )
        logger.info(
            "Created SQL Anywhere connection pool",
            extra={"host": self.settings.host, "port": self.settings.port, "pool_size": self.settings.pool_size},
        )
        return pool

    def _raw_connect(self) -> Any:
        return pyodbc.connect(
            self.settings.get_odbc_string(),
            timeout=self.settings.connect_timeout,
            autocommit=True,
        )

    @traced(
        span_name="sybase_dialect.connection.connect",
        attribute_getter=lambda self: {"net.peer.name": self.settings.host, "net.peer.port": self.settings.port},
    )
    def connect(self) -> ConnectionHandle:
        """Check out a connection.

        Transient driver failures are retried with exponential backoff.

        Raises:
            DatabaseConnectionError: If no connection could be opened
        """
        checkout = retry_with_backoff(
            max_retries=self.settings.max_retries,
            initial_delay=self.settings.retry_delay_seconds,
            retry_on=_TRANSIENT_ERRORS,
        )(self.pool.connect)

        try:
            connection = checkout()
        except (pyodbc.Error, PoolTimeoutError) as exc:
            raise connection_error(
                f"Failed to connect to SQL Anywhere at {self.settings.host}:{self.settings.port}",
                host=self.settings.host,
                port=self.settings.port,
                cause=exc,
                is_retryable=isinstance(exc, _TRANSIENT_ERRORS),
            ) from exc

        handle = ConnectionHandle(connection, self.parsers)
        logger.info("Connection opened", extra={"connection_id": handle.connection_id})
        return handle

    def disconnect(self, handle: ConnectionHandle) -> None:
        """Return a connection to the pool. Closed handles are ignored."""
        if handle.closed:
            return
        handle.close()
        logger.debug("Connection closed", extra={"connection_id": handle.connection_id})

    def validate(self, handle: ConnectionHandle) -> bool:
        """True iff the handle is open and the session answers a trivial query."""
        if handle.closed:
            return False
        try:
            handle.fetch_all("SELECT 1;")
        except DialectError:
            return False
        return True

    def refresh_type_parsers(self, tags: List[DataTypeTag]) -> None:
        self.parsers.refresh(tags)

    def clear_type_parsers(self) -> None:
        self.parsers.clear()

    def dispose(self) -> None:
        """Close every pooled connection."""
        if self._pool is not None:
            self._pool.dispose()
            self._pool = None
