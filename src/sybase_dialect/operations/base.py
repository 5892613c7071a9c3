"""Base operation definitions.

Operations are data structures that describe what SQL should be
generated, independent of how it is rendered. The query builder
dispatches on ``operation_type``.
"""

from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from sybase_dialect.constants.sql import QueryType
from sybase_dialect.types.base import DialectBaseModel
from sybase_dialect.types.columns import TableRef, coerce_table


def _stringify(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class BaseOperation(DialectBaseModel):
    """Base class for all generator requests.

    Operations are pure data structures that describe WHAT to do,
    not HOW to do it. They are transformed into SQL by the query builder
    and executed by the caller over a connection it owns.

    Attributes:
        operation_type: The type of operation to perform
        logging_context: Extra key/value pairs attached to logs and spans
    """
    operation_type: QueryType
    logging_context: Optional[dict] = Field(default_factory=dict, description="Optional context for logging/tracking")

    def observability_attributes(self) -> Dict[str, str]:
        """Return key attributes useful for logging and span attributes."""
        attrs: Dict[str, str] = {
            "operation_type": self.operation_type.value,
        }
        for key, value in (self.logging_context or {}).items():
            sanitized = _stringify(value)
            if sanitized is not None:
                attrs[f"context_{key}"] = sanitized
        return attrs


class TableOperation(BaseOperation):
    """Operation scoped to one table. A plain string is accepted as the table."""

    table: TableRef

    @field_validator("table", mode="before")
    @classmethod
    def coerce_table_ref(cls, v: Any) -> TableRef:
        return coerce_table(v)

    def observability_attributes(self) -> Dict[str, str]:
        attrs = super().observability_attributes()
        attrs["table"] = str(self.table)
        return attrs
