"""Column types and literal escaping for SQL Anywhere.

Column types are a closed set of tagged variants. ``to_sql_type`` and
``to_literal`` dispatch on ``DataType.tag`` through handler tables, and
``normalize_data_type`` strips options the engine does not accept,
returning a new type plus the list of adjustments it made.
"""

import math
import re
import uuid
from datetime import date, datetime, time, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import Field, field_validator

from sybase_dialect.common.exceptions import ErrorCode, invalid_request_error
from sybase_dialect.constants.data_types import (
    DataTypeTag,
    DynamicDefault,
    INTEGER_TAGS,
    LARGE_OBJECT_TAGS,
)
from sybase_dialect.types.base import DialectBaseModel


DEFAULT_STRING_LENGTH = 255

_SHORTHAND = re.compile(r"^\s*([A-Za-z_ ]+?)\s*(?:\((.*)\))?\s*$")
_QUOTED_VALUE = re.compile(r"'((?:[^']|'')*)'")

_TAG_ALIASES: Dict[str, DataTypeTag] = {
    "VARCHAR": DataTypeTag.STRING,
    "INT": DataTypeTag.INTEGER,
    "NUMERIC": DataTypeTag.DECIMAL,
    "DATETIME": DataTypeTag.DATE,
    "BOOL": DataTypeTag.BOOLEAN,
    "LONG BINARY": DataTypeTag.BLOB,
}


def _enum_values(args: str) -> List[str]:
    """Split ENUM arguments, honouring commas and doubled quotes inside literals."""
    quoted = _QUOTED_VALUE.findall(args)
    if quoted:
        return [value.replace("''", "'") for value in quoted]
    return [part.strip().strip('"') for part in args.split(",") if part.strip()]


class RawSQL(DialectBaseModel):
    """SQL fragment inlined verbatim wherever a value is expected."""

    sql: str = Field(..., min_length=1)

    def __str__(self) -> str:
        return self.sql


class DataType(DialectBaseModel):
    """Logical column type.

    Examples:
        >>> DataType(tag=DataTypeTag.STRING, length=100)
        >>> DataType.parse("DECIMAL(10,2)")
        >>> DataType(tag=DataTypeTag.ENUM, values=["draft", "sent"])
    """

    tag: DataTypeTag
    length: Optional[int] = Field(default=None, gt=0)
    scale: Optional[int] = Field(default=None, ge=0)
    values: List[str] = Field(default_factory=list)
    binary: bool = False
    unsigned: bool = False
    zerofill: bool = False

    @field_validator("tag", mode="before")
    @classmethod
    def resolve_alias(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, DataTypeTag):
            key = v.strip().upper()
            return _TAG_ALIASES.get(key, key)
        return v

    @classmethod
    def parse(cls, spec: str) -> "DataType":
        """Build a DataType from shorthand such as ``STRING(100)`` or ``ENUM('a','b')``."""
        match = _SHORTHAND.match(spec)
        if not match:
            raise ValueError(f"Unrecognized column type: '{spec}'")

        name, args = match.group(1), match.group(2)
        data_type = cls(tag=name)
        if not args:
            return data_type

        if data_type.tag == DataTypeTag.ENUM:
            return data_type.model_copy(update={"values": _enum_values(args)})

        parts = [part.strip() for part in args.split(",") if part.strip()]

        update: Dict[str, Any] = {"length": int(parts[0])}
        if len(parts) > 1:
            update["scale"] = int(parts[1])
        return cls(tag=data_type.tag, **update)

    @property
    def is_integer(self) -> bool:
        return self.tag in INTEGER_TAGS

    @property
    def is_large_object(self) -> bool:
        """True for types the engine refuses a DEFAULT on."""
        if self.tag in LARGE_OBJECT_TAGS:
            return True
        return self.tag == DataTypeTag.STRING and self.binary


def coerce_data_type(value: Union[str, DataTypeTag, DataType, Dict[str, Any]]) -> DataType:
    """Accept the forms callers use to name a column type."""
    if isinstance(value, DataType):
        return value
    if isinstance(value, DataTypeTag):
        return DataType(tag=value)
    if isinstance(value, str):
        return DataType.parse(value)
    return DataType.model_validate(value)


# --- SQL type rendering ---------------------------------------------------

def _string_sql(data_type: DataType) -> str:
    length = data_type.length or DEFAULT_STRING_LENGTH
    return f"VARBINARY({length})" if data_type.binary else f"VARCHAR({length})"


def _char_sql(data_type: DataType) -> str:
    length = data_type.length or DEFAULT_STRING_LENGTH
    return f"BINARY({length})" if data_type.binary else f"CHAR({length})"


def _float_sql(data_type: DataType) -> str:
    return f"FLOAT({data_type.length})" if data_type.length else "FLOAT"


def _decimal_sql(data_type: DataType) -> str:
    if data_type.length and data_type.scale is not None:
        return f"NUMERIC({data_type.length},{data_type.scale})"
    if data_type.length:
        return f"NUMERIC({data_type.length})"
    return "NUMERIC"


def _fixed(sql: str) -> Callable[[DataType], str]:
    return lambda _data_type: sql


_SQL_TYPE_HANDLERS: Dict[DataTypeTag, Callable[[DataType], str]] = {
    DataTypeTag.STRING: _string_sql,
    DataTypeTag.CHAR: _char_sql,
    DataTypeTag.TEXT: _fixed("VARCHAR(8000)"),
    DataTypeTag.TINYINT: _fixed("TINYINT"),
    DataTypeTag.SMALLINT: _fixed("SMALLINT"),
    DataTypeTag.INTEGER: _fixed("INTEGER"),
    DataTypeTag.BIGINT: _fixed("BIGINT"),
    DataTypeTag.FLOAT: _float_sql,
    DataTypeTag.REAL: _fixed("REAL"),
    DataTypeTag.DOUBLE: _fixed("DOUBLE"),
    DataTypeTag.DECIMAL: _decimal_sql,
    DataTypeTag.DATE: _fixed("DATETIME"),
    DataTypeTag.DATEONLY: _fixed("DATE"),
    DataTypeTag.TIME: _fixed("TIME"),
    DataTypeTag.BOOLEAN: _fixed("TINYINT"),
    DataTypeTag.UUID: _fixed("VARCHAR(255)"),
    DataTypeTag.ENUM: _fixed("VARCHAR(255)"),
    DataTypeTag.BLOB: _fixed("LONG BINARY"),
}


def to_sql_type(data_type: DataType) -> str:
    """Render the engine type name for a column type."""
    return _SQL_TYPE_HANDLERS[data_type.tag](data_type)


# --- Literal escaping -----------------------------------------------------

_DYNAMIC_SQL: Dict[DynamicDefault, str] = {
    DynamicDefault.NOW: "GETDATE()",
    DynamicDefault.UUIDV1: "NEWID()",
    DynamicDefault.UUIDV4: "NEWID()",
}


def quote_string(value: str) -> str:
    """Quote a string value for SQL, doubling embedded single quotes."""
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def _format_datetime(value: datetime, timezone: Optional[tzinfo]) -> str:
    if timezone is not None and value.tzinfo is not None:
        value = value.astimezone(timezone)
    return quote_string(value.strftime("%Y-%m-%d %H:%M:%S"))


def _is_finite(value: Union[float, Decimal]) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def _escape_untyped(value: Any, timezone: Optional[tzinfo]) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, RawSQL):
        return value.sql
    if isinstance(value, DynamicDefault):
        return _DYNAMIC_SQL[value]
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (float, Decimal)) and not _is_finite(value):
        raise invalid_request_error(
            f"Cannot inline non-finite number {value!r} as SQL",
            field="value",
            error_code=ErrorCode.INVALID_ARGUMENT,
        )
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return _format_datetime(value, timezone)
    if isinstance(value, date):
        return quote_string(value.strftime("%Y-%m-%d"))
    if isinstance(value, time):
        return quote_string(value.strftime("%H:%M:%S"))
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, uuid.UUID):
        return quote_string(str(value))
    if isinstance(value, (list, tuple)):
        return "(" + ", ".join(_escape_untyped(item, timezone) for item in value) + ")"
    if isinstance(value, Enum):
        return _escape_untyped(value.value, timezone)
    return quote_string(str(value))


def _boolean_literal(value: Any, timezone: Optional[tzinfo]) -> str:
    return "1" if value else "0"


def _dateonly_literal(value: Any, timezone: Optional[tzinfo]) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return _escape_untyped(value, timezone)


def _datetime_literal(value: Any, timezone: Optional[tzinfo]) -> str:
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    return _escape_untyped(value, timezone)


_LITERAL_HANDLERS: Dict[DataTypeTag, Callable[[Any, Optional[tzinfo]], str]] = {
    DataTypeTag.BOOLEAN: _boolean_literal,
    DataTypeTag.DATEONLY: _dateonly_literal,
    DataTypeTag.DATE: _datetime_literal,
}


def to_literal(value: Any, data_type: Optional[DataType] = None, timezone: Optional[tzinfo] = None) -> str:
    """Render a Python value as an inline SQL literal.

    Args:
        value: Value to escape
        data_type: Optional column type used as a hint (booleans, dates)
        timezone: Target timezone for aware datetimes

    Returns:
        Literal SQL text
    """
    if value is None or isinstance(value, (RawSQL, DynamicDefault, list, tuple)):
        return _escape_untyped(value, timezone)

    handler = _LITERAL_HANDLERS.get(data_type.tag) if data_type is not None else None
    if handler is not None:
        return handler(value, timezone)
    return _escape_untyped(value, timezone)


# --- Normalization --------------------------------------------------------

def normalize_data_type(data_type: DataType) -> Tuple[DataType, List[str]]:
    """Strip type options the engine does not accept.

    Returns a new DataType; the input is left untouched.

    Returns:
        Tuple of (normalized type, list of adjustment diagnostics)
    """
    diagnostics: List[str] = []
    update: Dict[str, Any] = {}
    name = data_type.tag.value

    if data_type.is_integer:
        if data_type.length or data_type.unsigned or data_type.zerofill:
            diagnostics.append(
                f"{name} does not support options. Plain `{name}` will be used instead."
            )
            update.update(length=None, unsigned=False, zerofill=False)

    elif data_type.tag == DataTypeTag.FLOAT:
        if data_type.scale is not None:
            diagnostics.append("FLOAT does not support decimals. Plain `FLOAT` will be used instead.")
            update.update(length=None, scale=None)
        if data_type.unsigned:
            diagnostics.append("FLOAT does not support unsigned. `UNSIGNED` was removed.")
            update["unsigned"] = False
        if data_type.zerofill:
            diagnostics.append("FLOAT does not support zerofill. `ZEROFILL` was removed.")
            update["zerofill"] = False

    if not update:
        return data_type, diagnostics
    return data_type.model_copy(update=update), diagnostics
