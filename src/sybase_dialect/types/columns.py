"""Table and column descriptors supplied by the ORM layer.

These models are the engine-agnostic request vocabulary: a table
reference, a column definition with its flags and optional inline
foreign key, and the model metadata upsert needs to pick a join key.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator, model_validator

from sybase_dialect.constants.data_types import DynamicDefault
from sybase_dialect.constants.sql import ReferentialAction, SortDirection
from sybase_dialect.types.base import DialectBaseModel
from sybase_dialect.types.data_types import DataType, coerce_data_type


class TableRef(DialectBaseModel):
    """Logical table name with an optional owner/schema."""

    name: str = Field(..., min_length=1, max_length=128)
    schema_name: Optional[str] = Field(default=None, max_length=128)

    def __str__(self) -> str:
        if self.schema_name:
            return f"{self.schema_name}.{self.name}"
        return self.name


def coerce_table(value: Union[str, TableRef, Dict[str, Any]]) -> TableRef:
    if isinstance(value, TableRef):
        return value
    if isinstance(value, str):
        return TableRef(name=value)
    return TableRef.model_validate(value)


def _coerce_action(value: Any) -> Any:
    if isinstance(value, str) and not isinstance(value, ReferentialAction):
        cleaned = value.strip().upper()
        return cleaned or None
    return value


class ForeignKeyReference(DialectBaseModel):
    """Inline foreign key target of a column."""

    table: str = Field(..., min_length=1)
    key: str = Field(default="id", min_length=1)
    on_delete: Optional[ReferentialAction] = None
    on_update: Optional[ReferentialAction] = None

    @field_validator("on_delete", "on_update", mode="before")
    @classmethod
    def normalize_action(cls, v: Any) -> Any:
        return _coerce_action(v)


class ColumnDefinition(DialectBaseModel):
    """Column definition for table creation and alteration.

    ``allow_null`` is tri-state: ``False`` renders NOT NULL, ``True``
    renders an explicit NULL, ``None`` leaves nullability to the engine.
    A default exists only when ``default_value`` was passed, so
    ``default_value=None`` means DEFAULT NULL.

    Examples:
        >>> ColumnDefinition(data_type="INTEGER", primary_key=True, auto_increment=True)
        >>> ColumnDefinition(data_type="STRING(60)", allow_null=False, default_value="n/a")
        >>> ColumnDefinition(
        ...     data_type="INTEGER",
        ...     references=ForeignKeyReference(table="users", on_delete="CASCADE"),
        ... )
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    data_type: DataType
    allow_null: Optional[bool] = None
    default_value: Any = None
    primary_key: bool = False
    auto_increment: bool = False
    unique: bool = False
    references: Optional[ForeignKeyReference] = None

    @field_validator("data_type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> DataType:
        return coerce_data_type(v)

    @property
    def has_default(self) -> bool:
        return "default_value" in self.model_fields_set

    @property
    def default_schemable(self) -> bool:
        """True when the default can be written into DDL."""
        if not self.has_default:
            return False
        return not isinstance(self.default_value, DynamicDefault) and not callable(self.default_value)

    def with_name(self, name: str) -> "ColumnDefinition":
        if self.name == name:
            return self
        return self.model_copy(update={"name": name})


def name_columns(columns: Dict[str, Any]) -> Dict[str, ColumnDefinition]:
    """Validate a column map and stamp each definition with its key."""
    named: Dict[str, ColumnDefinition] = {}
    for key, column in columns.items():
        if not isinstance(column, ColumnDefinition):
            if isinstance(column, dict):
                column = ColumnDefinition.model_validate(column)
            else:
                column = ColumnDefinition(data_type=column)
        named[key] = column if column.name else column.with_name(key)
    return named


class UniqueKey(DialectBaseModel):
    """Named composite unique constraint declared outside the column flags."""

    name: Optional[str] = None
    fields: List[str] = Field(..., min_length=1)


class IndexField(DialectBaseModel):
    name: str = Field(..., min_length=1)
    order: Optional[SortDirection] = None


class IndexDefinition(DialectBaseModel):
    """Index declared on a model or requested through AddIndex."""

    name: Optional[str] = None
    fields: List[Union[IndexField, str]] = Field(..., min_length=1)
    unique: bool = False

    @property
    def field_names(self) -> List[str]:
        return [f.name if isinstance(f, IndexField) else f for f in self.fields]


class ModelMeta(DialectBaseModel):
    """Attribute and index metadata for one model."""

    table_name: Optional[str] = None
    attributes: Dict[str, ColumnDefinition] = Field(default_factory=dict)
    indexes: List[IndexDefinition] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def stamp_attribute_names(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("attributes"), dict):
            data = dict(data)
            data["attributes"] = name_columns(data["attributes"])
        return data

    def _field(self, key: str) -> str:
        return self.attributes[key].name or key

    @property
    def primary_keys(self) -> List[str]:
        return [self._field(key) for key, attr in self.attributes.items() if attr.primary_key]

    @property
    def auto_increment_fields(self) -> List[str]:
        return [self._field(key) for key, attr in self.attributes.items() if attr.auto_increment]

    @property
    def unique_fields(self) -> List[str]:
        """Unique column flags followed by members of unique indexes."""
        fields = [self._field(key) for key, attr in self.attributes.items() if attr.unique]
        for index in self.indexes:
            if not index.unique:
                continue
            for field in index.field_names:
                if field not in fields and field in self.attributes:
                    fields.append(field)
        return fields

    @property
    def primary_key_field(self) -> Optional[str]:
        keys = self.primary_keys
        return keys[0] if keys else None
