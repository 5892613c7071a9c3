"""Where-tree request structure.

A where-tree is a recursive AND/OR grouping of (column, operator, value)
leaves. Plain mappings and lists are accepted as shorthand: a mapping is
an AND-group of equality leaves and a list is an OR-group of its members.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator

from sybase_dialect.common.exceptions import ErrorCode, InvalidRequestError, invalid_request_error
from sybase_dialect.constants.sql import Connector, WhereOperator
from sybase_dialect.types.base import DialectBaseModel


class WhereCondition(DialectBaseModel):
    column: str = Field(..., min_length=1)
    operator: WhereOperator = WhereOperator.EQ
    value: Any = None


class WhereGroup(DialectBaseModel):
    connector: Connector = Connector.AND
    items: List[Union[WhereCondition, "WhereGroup"]] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [coerce_where(item) for item in v]
        return v

    def clause_values(self) -> Dict[str, Any]:
        """Flatten an AND-group of equality leaves into a column/value map.

        Raises:
            InvalidRequestError: If the group contains an OR-group or a
                non-equality leaf, since neither pins down a single row
        """
        if self.connector != Connector.AND:
            raise _key_clause_error("an OR-group cannot identify a single row")
        values: Dict[str, Any] = {}
        for item in self.items:
            values.update(clause_values(item))
        return values


WhereGroup.model_rebuild()

WhereTree = Union[WhereCondition, WhereGroup]


def coerce_where(value: Any) -> Optional[WhereTree]:
    """Normalize shorthand where input into a WhereCondition or WhereGroup."""
    if value is None or isinstance(value, (WhereCondition, WhereGroup)):
        return value
    if isinstance(value, dict):
        if "column" in value and set(value) <= {"column", "operator", "value"}:
            return WhereCondition.model_validate(value)
        if "items" in value and set(value) <= {"connector", "items"}:
            return WhereGroup.model_validate(value)
        return WhereGroup(
            connector=Connector.AND,
            items=[WhereCondition(column=column, value=v) for column, v in value.items()],
        )
    if isinstance(value, list):
        return WhereGroup(connector=Connector.OR, items=value)
    raise ValueError(f"Unsupported where clause: {value!r}")


def _key_clause_error(reason: str) -> InvalidRequestError:
    return invalid_request_error(
        f"Key clause is not a plain equality match: {reason}",
        field="where",
        error_code=ErrorCode.INVALID_ARGUMENT,
    )


def clause_values(clause: WhereTree) -> Dict[str, Any]:
    if isinstance(clause, WhereCondition):
        if clause.operator != WhereOperator.EQ:
            raise _key_clause_error(f"'{clause.column}' is compared with '{clause.operator.value}'")
        return {clause.column: clause.value}
    return clause.clause_values()
