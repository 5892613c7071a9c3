"""Constants module for sybase_dialect.

This module contains all constant values and enumerations used throughout
the package. As Layer 0 in the architecture, this module has no
dependencies on other sybase_dialect modules.

Organization:
    - sql: Operation types, where-tree operators and referential actions
    - data_types: Column type tags and dynamic defaults
"""

# SQL/Query constants
from sybase_dialect.constants.sql import (
    QueryType,
    Connector,
    WhereOperator,
    SortDirection,
    ReferentialAction,
)

# Column type constants
from sybase_dialect.constants.data_types import (
    DataTypeTag,
    DynamicDefault,
    INTEGER_TAGS,
    LARGE_OBJECT_TAGS,
)

__all__ = [
    # SQL
    "QueryType",
    "Connector",
    "WhereOperator",
    "SortDirection",
    "ReferentialAction",
    # Data types
    "DataTypeTag",
    "DynamicDefault",
    "INTEGER_TAGS",
    "LARGE_OBJECT_TAGS",
]
