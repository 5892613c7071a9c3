"""Query builders that turn operations into SQL Anywhere statements."""

from sybase_dialect.query_builder.attributes import AttributeRenderer
from sybase_dialect.query_builder.base import BaseQueryBuilder
from sybase_dialect.query_builder.factory import QueryBuilderFactory, get_query_builder
from sybase_dialect.query_builder.fragments import (
    ColumnFragment,
    ReferenceFragment,
    TableConstraint,
    join_statements,
    wrap_identity_insert,
)
from sybase_dialect.query_builder.sybase import SybaseQueryBuilder

__all__ = [
    "AttributeRenderer",
    "BaseQueryBuilder",
    "ColumnFragment",
    "QueryBuilderFactory",
    "ReferenceFragment",
    "SybaseQueryBuilder",
    "TableConstraint",
    "get_query_builder",
    "join_statements",
    "wrap_identity_insert",
]
