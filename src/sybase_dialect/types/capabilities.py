"""Capability matrix describing what the engine supports.

The query builder reads these flags to gate generation paths; it never
computes them. Defaults mirror SQL Anywhere 12.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Capabilities(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AutoIncrementSupport(_Capabilities):
    identity_insert: bool = True
    default_value: bool = False
    update: bool = False
    returning: bool = True


class ConstraintSupport(_Capabilities):
    restrict: bool = False
    default: bool = True


class IndexSupport(_Capabilities):
    collate: bool = False
    length: bool = False
    parser: bool = False
    type: bool = True
    using: bool = False
    where: bool = True


class Supports(_Capabilities):
    """Feature flags for the target engine.

    Example:
        >>> Supports(limit_on_update=True)  # engine build that accepts UPDATE TOP
    """

    default: bool = True
    default_values: bool = Field(default=True, alias="DEFAULT VALUES")
    limit_on_update: bool = Field(default=False, alias="LIMIT ON UPDATE")
    order_nulls: bool = Field(default=False, alias="ORDER NULLS")
    lock: bool = False
    transactions: bool = False
    migrations: bool = False
    upserts: bool = False
    schemas: bool = False
    offset: bool = True
    autoincrement: AutoIncrementSupport = Field(default_factory=AutoIncrementSupport)
    constraints: ConstraintSupport = Field(default_factory=ConstraintSupport)
    index: IndexSupport = Field(default_factory=IndexSupport)
    numeric: bool = True
    sub_query_limit: bool = False
    tmp_table_trigger: bool = True
