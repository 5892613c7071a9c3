"""Typed SQL fragments.

Column definitions and table constraints are composed as small frozen
records and serialized to text only at the end, so quoting and escaping
happen exactly once per token.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple

IDENTITY_INSERT_CLEAR = "SET TEMPORARY OPTION IDENTITY_INSERT = '';"


@dataclass(frozen=True)
class ReferenceFragment:
    """``REFERENCES "t" ("k") [ON DELETE x] [ON UPDATE y]``."""

    table_sql: str
    key_sql: str
    on_delete: Optional[str] = None
    on_update: Optional[str] = None

    def without_actions(self) -> "ReferenceFragment":
        return replace(self, on_delete=None, on_update=None)

    @property
    def has_actions(self) -> bool:
        return bool(self.on_delete or self.on_update)

    def to_sql(self) -> str:
        sql = f"REFERENCES {self.table_sql} ({self.key_sql})"
        if self.on_delete:
            sql += f" ON DELETE {self.on_delete}"
        if self.on_update:
            sql += f" ON UPDATE {self.on_update}"
        return sql


@dataclass(frozen=True)
class ColumnFragment:
    """Rendered pieces of one column definition, in emission order."""

    name: str
    type_sql: str
    nullability: Optional[str] = None
    identity: bool = False
    default_sql: Optional[str] = None
    unique: bool = False
    primary_key: bool = False
    reference: Optional[ReferenceFragment] = None

    def to_sql(self, inline_primary_key: bool = True, inline_reference: bool = True) -> str:
        parts = [self.type_sql]
        if self.nullability:
            parts.append(self.nullability)
        if self.identity:
            parts.append("IDENTITY")
        if self.default_sql is not None:
            parts.append(f"DEFAULT {self.default_sql}")
        if self.unique:
            parts.append("UNIQUE")
        if self.primary_key and inline_primary_key:
            parts.append("PRIMARY KEY")
        if self.reference is not None and inline_reference:
            parts.append(self.reference.to_sql())
        return " ".join(parts)


@dataclass(frozen=True)
class TableConstraint:
    """Trailing table-level constraint of a CREATE TABLE body."""

    kind: str
    columns_sql: Tuple[str, ...] = field(default_factory=tuple)
    reference: Optional[ReferenceFragment] = None

    def to_sql(self) -> str:
        sql = f"{self.kind} ({', '.join(self.columns_sql)})"
        if self.reference is not None:
            sql += f" {self.reference.to_sql()}"
        return sql


def join_statements(statements: Iterable[str]) -> str:
    """Join terminated statements with a single space, skipping empty ones."""
    return " ".join(s for s in statements if s)


def wrap_identity_insert(body: str, table_sql: str) -> str:
    """Enable explicit identity values for ``table_sql`` around ``body``."""
    return join_statements([
        f"SET TEMPORARY OPTION IDENTITY_INSERT = {table_sql};",
        body,
        IDENTITY_INSERT_CLEAR,
    ])
