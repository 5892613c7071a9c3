"""Type definitions for sybase_dialect.

This module provides the request vocabulary shared by the operations and
the query builder: column types, table and column descriptors, the
where-tree, the capability matrix and the type parser registry.
"""

from .base import DialectBaseModel
from .data_types import (
    DataType,
    RawSQL,
    coerce_data_type,
    normalize_data_type,
    quote_string,
    to_literal,
    to_sql_type,
)
from .capabilities import AutoIncrementSupport, ConstraintSupport, IndexSupport, Supports
from .columns import (
    ColumnDefinition,
    ForeignKeyReference,
    IndexDefinition,
    IndexField,
    ModelMeta,
    TableRef,
    UniqueKey,
    coerce_table,
    name_columns,
)
from .where import WhereCondition, WhereGroup, WhereTree, clause_values, coerce_where
from .parsers import TypeParserRegistry

__all__ = [
    'DialectBaseModel',
    # Column types
    'DataType',
    'RawSQL',
    'coerce_data_type',
    'normalize_data_type',
    'quote_string',
    'to_literal',
    'to_sql_type',
    # Capabilities
    'AutoIncrementSupport',
    'ConstraintSupport',
    'IndexSupport',
    'Supports',
    # Tables and columns
    'ColumnDefinition',
    'ForeignKeyReference',
    'IndexDefinition',
    'IndexField',
    'ModelMeta',
    'TableRef',
    'UniqueKey',
    'coerce_table',
    'name_columns',
    # Where-tree
    'WhereCondition',
    'WhereGroup',
    'WhereTree',
    'clause_values',
    'coerce_where',
    # Parsers
    'TypeParserRegistry',
]
