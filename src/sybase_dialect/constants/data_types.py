"""Column type constants.

The engine's column types form a closed set. Each member of
``DataTypeTag`` names one logical type. Rendering and literal escaping
dispatch on the tag (see ``sybase_dialect.types.data_types``).
"""

from enum import Enum


class DataTypeTag(str, Enum):
    """Logical column type tags."""

    STRING = "STRING"
    CHAR = "CHAR"
    TEXT = "TEXT"
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    FLOAT = "FLOAT"
    REAL = "REAL"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    DATE = "DATE"
    DATEONLY = "DATEONLY"
    TIME = "TIME"
    BOOLEAN = "BOOLEAN"
    UUID = "UUID"
    ENUM = "ENUM"
    BLOB = "BLOB"


class DynamicDefault(str, Enum):
    """Defaults computed at insert time; never rendered into DDL."""

    NOW = "NOW"
    UUIDV1 = "UUIDV1"
    UUIDV4 = "UUIDV4"


INTEGER_TAGS = frozenset({
    DataTypeTag.TINYINT,
    DataTypeTag.SMALLINT,
    DataTypeTag.INTEGER,
    DataTypeTag.BIGINT,
})

# Types the engine refuses a DEFAULT on
LARGE_OBJECT_TAGS = frozenset({
    DataTypeTag.TEXT,
    DataTypeTag.BLOB,
})
