"""Read-only catalog introspection operations.

Each request becomes a single SELECT against the SYS catalog views.
"""

from typing import Literal, Optional

from pydantic import Field

from sybase_dialect.constants.sql import QueryType
from sybase_dialect.operations.base import BaseOperation, TableOperation


class DescribeTable(TableOperation):
    operation_type: Literal[QueryType.DESCRIBE_TABLE] = Field(
        default=QueryType.DESCRIBE_TABLE,
        frozen=True
    )


class ShowTables(BaseOperation):
    operation_type: Literal[QueryType.SHOW_TABLES] = Field(
        default=QueryType.SHOW_TABLES,
        frozen=True
    )


class ShowIndexes(TableOperation):
    operation_type: Literal[QueryType.SHOW_INDEXES] = Field(
        default=QueryType.SHOW_INDEXES,
        frozen=True
    )


class ShowConstraints(TableOperation):
    operation_type: Literal[QueryType.SHOW_CONSTRAINTS] = Field(
        default=QueryType.SHOW_CONSTRAINTS,
        frozen=True
    )
    constraint_name: Optional[str] = None


class GetPrimaryKeyConstraint(TableOperation):
    """Primary key constraint lookup, optionally narrowed to one column."""
    operation_type: Literal[QueryType.GET_PRIMARY_KEY_CONSTRAINT] = Field(
        default=QueryType.GET_PRIMARY_KEY_CONSTRAINT,
        frozen=True
    )
    column_name: Optional[str] = None


class GetForeignKeys(TableOperation):
    """Foreign keys declared on a table."""
    operation_type: Literal[QueryType.GET_FOREIGN_KEYS] = Field(
        default=QueryType.GET_FOREIGN_KEYS,
        frozen=True
    )


class Version(BaseOperation):
    operation_type: Literal[QueryType.VERSION] = Field(
        default=QueryType.VERSION,
        frozen=True
    )
