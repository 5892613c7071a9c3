"""SQL generation for Sybase SQL Anywhere.

Build a request, hand it to the query builder, run the text on a
connection you own:

    >>> from sybase_dialect import get_query_builder
    >>> from sybase_dialect.operations import CreateTable
    >>> builder = get_query_builder()
    >>> builder.build_query(CreateTable(table="t", columns={"id": "INTEGER"}))

The driver layer lives in ``sybase_dialect.connection`` and is imported
on demand since it needs the ODBC driver manager.
"""

from sybase_dialect.__version__ import __version__

from sybase_dialect.common.exceptions import (
    DatabaseConnectionError,
    DialectError,
    ErrorCode,
    InvalidRequestError,
    QueryExecutionError,
    UnsupportedFeatureError,
)
from sybase_dialect.query_builder import (
    AttributeRenderer,
    BaseQueryBuilder,
    QueryBuilderFactory,
    SybaseQueryBuilder,
    get_query_builder,
)
from sybase_dialect.settings import GeneratorSettings, ConnectionSettings, get_settings
from sybase_dialect.types import TypeParserRegistry

__all__ = [
    "__version__",

    # Query building
    "AttributeRenderer",
    "BaseQueryBuilder",
    "QueryBuilderFactory",
    "SybaseQueryBuilder",
    "get_query_builder",

    # Settings
    "ConnectionSettings",
    "GeneratorSettings",
    "get_settings",

    # Parsers
    "TypeParserRegistry",

    # Exceptions (public API)
    "DialectError",
    "ErrorCode",
    "InvalidRequestError",
    "UnsupportedFeatureError",
    "DatabaseConnectionError",
    "QueryExecutionError",
]
