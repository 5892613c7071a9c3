"""Data Manipulation Language (DML) operations.

This module contains operation classes for SELECT, bulk INSERT,
UPDATE, DELETE and the MERGE-based upsert.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from sybase_dialect.constants.sql import Connector, QueryType, SortDirection
from sybase_dialect.operations.base import TableOperation
from sybase_dialect.types.base import DialectBaseModel
from sybase_dialect.types.columns import ColumnDefinition, ModelMeta, name_columns
from sybase_dialect.types.where import WhereGroup, WhereTree, coerce_where


class OrderBy(DialectBaseModel):
    """One ORDER BY term. ``"name DESC"`` and ``("name", "DESC")`` are accepted."""

    column: str = Field(..., min_length=1)
    direction: SortDirection = SortDirection.ASC

    @model_validator(mode="before")
    @classmethod
    def from_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            parts = data.split()
            if len(parts) == 2 and parts[1].upper() in ("ASC", "DESC"):
                return {"column": parts[0], "direction": parts[1].upper()}
            return {"column": data}
        if isinstance(data, (list, tuple)):
            return {"column": data[0], "direction": str(data[1]).upper()}
        return data


class _Filtered(TableOperation):
    where: Optional[WhereTree] = None

    @field_validator("where", mode="before")
    @classmethod
    def coerce_where_tree(cls, v: Any) -> Any:
        return coerce_where(v)


class Select(_Filtered):
    """Select data operation.

    Supports:
    - Column selection (None = SELECT *)
    - WHERE filtering through a where-tree
    - ORDER BY, TOP and row-number pagination for offsets

    When ``offset`` is set and ``order`` is empty, ``primary_key_field``
    supplies the ordering.
    """
    operation_type: Literal[QueryType.SELECT] = Field(
        default=QueryType.SELECT,
        frozen=True
    )

    columns: Optional[List[str]] = Field(default=None)
    alias: Optional[str] = Field(default=None)
    joins: List[str] = Field(default_factory=list)

    order: List[OrderBy] = Field(default_factory=list)
    primary_key_field: Optional[str] = Field(default=None)

    limit: Optional[int] = Field(default=None, gt=0)
    offset: Optional[int] = Field(default=None, ge=0)


class BulkInsert(TableOperation):
    """Multi-row insert.

    ``attributes`` describes the model columns; it identifies identity
    columns and supplies type hints for literal escaping.
    """
    operation_type: Literal[QueryType.BULK_INSERT] = Field(
        default=QueryType.BULK_INSERT,
        frozen=True
    )
    rows: List[Dict[str, Any]] = Field(..., min_length=1)
    attributes: Dict[str, ColumnDefinition] = Field(default_factory=dict)

    @field_validator("attributes", mode="before")
    @classmethod
    def stamp_attribute_names(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return name_columns(v)
        return v


class Update(_Filtered):
    """Update data operation."""
    operation_type: Literal[QueryType.UPDATE] = Field(
        default=QueryType.UPDATE,
        frozen=True
    )
    values: Dict[str, Any] = Field(...)
    limit: Optional[int] = Field(default=None, gt=0)
    attributes: Dict[str, ColumnDefinition] = Field(default_factory=dict)

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if not v:
            raise ValueError("values cannot be empty")
        return v

    @field_validator("attributes", mode="before")
    @classmethod
    def stamp_attribute_names(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return name_columns(v)
        return v


class Delete(_Filtered):
    """Delete data operation.

    Leaving ``limit`` unset applies the configured default row cap;
    passing ``limit=None`` removes the cap. ``truncate`` ignores
    ``where`` and ``limit``.
    """
    operation_type: Literal[QueryType.DELETE] = Field(
        default=QueryType.DELETE,
        frozen=True
    )
    limit: Optional[int] = Field(default=None, gt=0)
    truncate: bool = False

    def resolve_limit(self, default: int) -> Optional[int]:
        if "limit" not in self.model_fields_set:
            return default
        return self.limit


class Upsert(TableOperation):
    """Insert-or-update through MERGE.

    ``where`` holds the candidate match clauses, one per primary or
    unique key. A where-tree whose root is an OR-group is split into
    its members.

    Example:
        >>> Upsert(
        ...     table="users",
        ...     insert_values={"id": 1, "email": "a@x"},
        ...     update_values={"email": "a@x"},
        ...     where=[{"id": 1}, {"email": "a@x"}],
        ...     model=ModelMeta(attributes={...}),
        ... )
    """
    operation_type: Literal[QueryType.UPSERT] = Field(
        default=QueryType.UPSERT,
        frozen=True
    )
    insert_values: Dict[str, Any] = Field(..., min_length=1)
    update_values: Dict[str, Any] = Field(default_factory=dict)
    where: List[WhereTree] = Field(default_factory=list)
    model: ModelMeta = Field(default_factory=ModelMeta)

    @field_validator("where", mode="before")
    @classmethod
    def split_candidates(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            tree = coerce_where(v)
            if isinstance(tree, WhereGroup) and tree.connector == Connector.OR:
                return list(tree.items)
            return [tree]
        return [coerce_where(item) for item in v]
