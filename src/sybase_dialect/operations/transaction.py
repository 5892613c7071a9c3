"""Transaction boundary operations.

A ``Transaction`` describes whether the boundary is top level or a
savepoint nested in a parent. The generator only emits text; it does
not track transaction state.
"""

import secrets
from typing import Literal, Optional

from pydantic import Field

from sybase_dialect.constants.sql import QueryType
from sybase_dialect.operations.base import BaseOperation
from sybase_dialect.types.base import DialectBaseModel


def generate_transaction_id() -> str:
    return secrets.token_hex(10)


class Transaction(DialectBaseModel):
    name: str = Field(default_factory=generate_transaction_id, min_length=1)
    parent: Optional["Transaction"] = None

    @property
    def is_nested(self) -> bool:
        return self.parent is not None

    def child(self) -> "Transaction":
        """Open a savepoint nested in this transaction."""
        return Transaction(parent=self)


Transaction.model_rebuild()


class _TransactionOperation(BaseOperation):
    transaction: Transaction = Field(default_factory=Transaction)


class StartTransaction(_TransactionOperation):
    operation_type: Literal[QueryType.START_TRANSACTION] = Field(
        default=QueryType.START_TRANSACTION,
        frozen=True
    )


class CommitTransaction(_TransactionOperation):
    operation_type: Literal[QueryType.COMMIT_TRANSACTION] = Field(
        default=QueryType.COMMIT_TRANSACTION,
        frozen=True
    )


class RollbackTransaction(_TransactionOperation):
    operation_type: Literal[QueryType.ROLLBACK_TRANSACTION] = Field(
        default=QueryType.ROLLBACK_TRANSACTION,
        frozen=True
    )


class SetAutocommit(BaseOperation):
    """Autocommit toggle. The engine needs no statement for it."""
    operation_type: Literal[QueryType.SET_AUTOCOMMIT] = Field(
        default=QueryType.SET_AUTOCOMMIT,
        frozen=True
    )
    value: bool = True
