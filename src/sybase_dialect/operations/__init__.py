"""Generator request operations.

Operations are pure data describing what SQL to generate. The query
builder turns each one into engine-native text.
"""

# Base operation
from sybase_dialect.operations.base import BaseOperation, TableOperation

# DDL operations
from sybase_dialect.operations.ddl import (
    AddColumn,
    AddIndex,
    ChangeColumn,
    CreateFunction,
    CreateTable,
    CreateTrigger,
    DropConstraint,
    DropForeignKey,
    DropFunction,
    DropTable,
    DropTrigger,
    RemoveColumn,
    RemoveIndex,
    RenameColumn,
    RenameFunction,
    RenameTable,
    RenameTrigger,
    RoutineOperation,
)

# Catalog operations
from sybase_dialect.operations.catalog import (
    DescribeTable,
    GetForeignKeys,
    GetPrimaryKeyConstraint,
    ShowConstraints,
    ShowIndexes,
    ShowTables,
    Version,
)

# DML operations
from sybase_dialect.operations.dml import (
    BulkInsert,
    Delete,
    OrderBy,
    Select,
    Update,
    Upsert,
)

# Transaction operations
from sybase_dialect.operations.transaction import (
    CommitTransaction,
    RollbackTransaction,
    SetAutocommit,
    StartTransaction,
    Transaction,
    generate_transaction_id,
)

__all__ = [
    # Base
    "BaseOperation",
    "TableOperation",
    # DDL
    "AddColumn",
    "AddIndex",
    "ChangeColumn",
    "CreateFunction",
    "CreateTable",
    "CreateTrigger",
    "DropConstraint",
    "DropForeignKey",
    "DropFunction",
    "DropTable",
    "DropTrigger",
    "RemoveColumn",
    "RemoveIndex",
    "RenameColumn",
    "RenameFunction",
    "RenameTable",
    "RenameTrigger",
    "RoutineOperation",
    # Catalog
    "DescribeTable",
    "GetForeignKeys",
    "GetPrimaryKeyConstraint",
    "ShowConstraints",
    "ShowIndexes",
    "ShowTables",
    "Version",
    # DML
    "BulkInsert",
    "Delete",
    "OrderBy",
    "Select",
    "Update",
    "Upsert",
    # Transactions
    "CommitTransaction",
    "RollbackTransaction",
    "SetAutocommit",
    "StartTransaction",
    "Transaction",
    "generate_transaction_id",
]
