"""Data Definition Language (DDL) operations.

This module contains operation classes for table, column, index and
constraint management, plus the trigger and function requests the
engine rejects.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import Field, field_validator, model_validator

from sybase_dialect.constants.sql import QueryType
from sybase_dialect.operations.base import BaseOperation, TableOperation
from sybase_dialect.types.columns import (
    ColumnDefinition,
    IndexField,
    TableRef,
    UniqueKey,
    coerce_table,
    name_columns,
)


class CreateTable(TableOperation):
    """Create table operation.

    Columns are keyed by name; the key is stamped onto each definition.
    ``unique_keys`` accepts ``UniqueKey`` objects or a mapping of
    constraint name to field list.

    Example:
        >>> CreateTable(
        ...     table="t",
        ...     columns={
        ...         "id": {"data_type": "INTEGER", "primary_key": True, "auto_increment": True},
        ...         "name": {"data_type": "STRING"},
        ...     },
        ... )
    """
    operation_type: Literal[QueryType.CREATE_TABLE] = Field(
        default=QueryType.CREATE_TABLE,
        frozen=True
    )
    columns: Dict[str, ColumnDefinition] = Field(..., min_length=1)
    unique_keys: List[UniqueKey] = Field(default_factory=list)

    @field_validator("columns", mode="before")
    @classmethod
    def stamp_column_names(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return name_columns(v)
        return v

    @field_validator("unique_keys", mode="before")
    @classmethod
    def coerce_unique_keys(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return [
                UniqueKey(name=name, fields=fields)
                if isinstance(fields, list) else UniqueKey.model_validate({"name": name, **fields})
                for name, fields in v.items()
            ]
        return v


class DropTable(TableOperation):
    """Drop table operation."""
    operation_type: Literal[QueryType.DROP_TABLE] = Field(
        default=QueryType.DROP_TABLE,
        frozen=True
    )


class RenameTable(TableOperation):
    operation_type: Literal[QueryType.RENAME_TABLE] = Field(
        default=QueryType.RENAME_TABLE,
        frozen=True
    )
    new_table: TableRef

    @field_validator("new_table", mode="before")
    @classmethod
    def coerce_new_table(cls, v: Any) -> TableRef:
        return coerce_table(v)


class AddColumn(TableOperation):
    operation_type: Literal[QueryType.ADD_COLUMN] = Field(
        default=QueryType.ADD_COLUMN,
        frozen=True
    )
    column_name: str = Field(..., min_length=1)
    column: ColumnDefinition

    @model_validator(mode="after")
    def stamp_column_name(self):
        if self.column.name != self.column_name:
            self.column = self.column.with_name(self.column_name)
        return self


class RemoveColumn(TableOperation):
    operation_type: Literal[QueryType.REMOVE_COLUMN] = Field(
        default=QueryType.REMOVE_COLUMN,
        frozen=True
    )
    column_name: str = Field(..., min_length=1)


class ChangeColumn(TableOperation):
    """Alter one or more column definitions.

    Columns carrying a foreign key reference become ADD CONSTRAINT
    clauses; the rest become ALTER COLUMN clauses.
    """
    operation_type: Literal[QueryType.CHANGE_COLUMN] = Field(
        default=QueryType.CHANGE_COLUMN,
        frozen=True
    )
    columns: Dict[str, ColumnDefinition] = Field(..., min_length=1)

    @field_validator("columns", mode="before")
    @classmethod
    def stamp_column_names(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return name_columns(v)
        return v


class RenameColumn(TableOperation):
    operation_type: Literal[QueryType.RENAME_COLUMN] = Field(
        default=QueryType.RENAME_COLUMN,
        frozen=True
    )
    old_name: str = Field(..., min_length=1)
    new_name: str = Field(..., min_length=1)


class AddIndex(TableOperation):
    """Create an index. The name defaults to ``<table>_<field>_<field>``."""
    operation_type: Literal[QueryType.ADD_INDEX] = Field(
        default=QueryType.ADD_INDEX,
        frozen=True
    )
    fields: List[Union[IndexField, str]] = Field(..., min_length=1)
    name: Optional[str] = None
    unique: bool = False

    @property
    def field_names(self) -> List[str]:
        return [f.name if isinstance(f, IndexField) else f for f in self.fields]


class RemoveIndex(TableOperation):
    """Drop an index by name, or by the field list it was created from."""
    operation_type: Literal[QueryType.REMOVE_INDEX] = Field(
        default=QueryType.REMOVE_INDEX,
        frozen=True
    )
    index_name: Optional[str] = None
    fields: Optional[List[str]] = None

    @model_validator(mode="after")
    def require_target(self):
        if not self.index_name and not self.fields:
            raise ValueError("RemoveIndex requires index_name or fields")
        return self


class DropForeignKey(TableOperation):
    operation_type: Literal[QueryType.DROP_FOREIGN_KEY] = Field(
        default=QueryType.DROP_FOREIGN_KEY,
        frozen=True
    )
    foreign_key: str = Field(..., min_length=1)


class DropConstraint(TableOperation):
    operation_type: Literal[QueryType.DROP_CONSTRAINT] = Field(
        default=QueryType.DROP_CONSTRAINT,
        frozen=True
    )
    constraint_name: str = Field(..., min_length=1)


class RoutineOperation(BaseOperation):
    """Trigger or function management request.

    The engine has no support for these; the builder rejects every one.
    """
    name: str = Field(..., min_length=1)
    table: Optional[TableRef] = None
    new_name: Optional[str] = None
    definition: Optional[str] = None

    @field_validator("table", mode="before")
    @classmethod
    def coerce_table_ref(cls, v: Any) -> Optional[TableRef]:
        return coerce_table(v) if v is not None else None


class CreateTrigger(RoutineOperation):
    operation_type: Literal[QueryType.CREATE_TRIGGER] = Field(default=QueryType.CREATE_TRIGGER, frozen=True)


class DropTrigger(RoutineOperation):
    operation_type: Literal[QueryType.DROP_TRIGGER] = Field(default=QueryType.DROP_TRIGGER, frozen=True)


class RenameTrigger(RoutineOperation):
    operation_type: Literal[QueryType.RENAME_TRIGGER] = Field(default=QueryType.RENAME_TRIGGER, frozen=True)


class CreateFunction(RoutineOperation):
    operation_type: Literal[QueryType.CREATE_FUNCTION] = Field(default=QueryType.CREATE_FUNCTION, frozen=True)


class DropFunction(RoutineOperation):
    operation_type: Literal[QueryType.DROP_FUNCTION] = Field(default=QueryType.DROP_FUNCTION, frozen=True)


class RenameFunction(RoutineOperation):
    operation_type: Literal[QueryType.RENAME_FUNCTION] = Field(default=QueryType.RENAME_FUNCTION, frozen=True)
