"""Driver-level connection layer that runs generated SQL."""

from sybase_dialect.connection.manager import ConnectionHandle, ConnectionManager

__all__ = ["ConnectionHandle", "ConnectionManager"]
