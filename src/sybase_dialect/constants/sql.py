"""SQL and query-related constants.

This module contains the operation and operator enums shared by the
request models and the query builder.

These constants are in Layer 0 as they represent core SQL concepts
that can be used by any layer without creating circular dependencies.
"""

from enum import Enum


class QueryType(str, Enum):
    """SQL operation type enumeration.

    Every request descriptor carries one of these values and the query
    builder dispatches on it.

    Categories:
    - DDL: CREATE_TABLE, DROP_TABLE, ADD_COLUMN, REMOVE_COLUMN, CHANGE_COLUMN,
           RENAME_COLUMN, RENAME_TABLE, ADD_INDEX, REMOVE_INDEX,
           DROP_FOREIGN_KEY, DROP_CONSTRAINT
    - Routines: CREATE_TRIGGER, DROP_TRIGGER, RENAME_TRIGGER,
           CREATE_FUNCTION, DROP_FUNCTION, RENAME_FUNCTION
    - Catalog: DESCRIBE_TABLE, SHOW_TABLES, SHOW_INDEXES, SHOW_CONSTRAINTS,
           GET_PRIMARY_KEY_CONSTRAINT, GET_FOREIGN_KEYS, VERSION
    - DML: SELECT, BULK_INSERT, UPDATE, DELETE, UPSERT
    - Transactions: START_TRANSACTION, COMMIT_TRANSACTION,
           ROLLBACK_TRANSACTION, SET_AUTOCOMMIT
    """

    # Data Query
    SELECT = "SELECT"

    # Data Manipulation (DML)
    BULK_INSERT = "BULK_INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    UPSERT = "UPSERT"

    # Data Definition (DDL) - Tables
    CREATE_TABLE = "CREATE_TABLE"
    DROP_TABLE = "DROP_TABLE"
    RENAME_TABLE = "RENAME_TABLE"

    # Data Definition (DDL) - Columns
    ADD_COLUMN = "ADD_COLUMN"
    REMOVE_COLUMN = "REMOVE_COLUMN"
    CHANGE_COLUMN = "CHANGE_COLUMN"
    RENAME_COLUMN = "RENAME_COLUMN"

    # Data Definition (DDL) - Indexes and constraints
    ADD_INDEX = "ADD_INDEX"
    REMOVE_INDEX = "REMOVE_INDEX"
    DROP_FOREIGN_KEY = "DROP_FOREIGN_KEY"
    DROP_CONSTRAINT = "DROP_CONSTRAINT"

    # Routines (not available on this engine)
    CREATE_TRIGGER = "CREATE_TRIGGER"
    DROP_TRIGGER = "DROP_TRIGGER"
    RENAME_TRIGGER = "RENAME_TRIGGER"
    CREATE_FUNCTION = "CREATE_FUNCTION"
    DROP_FUNCTION = "DROP_FUNCTION"
    RENAME_FUNCTION = "RENAME_FUNCTION"

    # Catalog introspection
    DESCRIBE_TABLE = "DESCRIBE_TABLE"
    SHOW_TABLES = "SHOW_TABLES"
    SHOW_INDEXES = "SHOW_INDEXES"
    SHOW_CONSTRAINTS = "SHOW_CONSTRAINTS"
    GET_PRIMARY_KEY_CONSTRAINT = "GET_PRIMARY_KEY_CONSTRAINT"
    GET_FOREIGN_KEYS = "GET_FOREIGN_KEYS"
    VERSION = "VERSION"

    # Transaction boundaries
    START_TRANSACTION = "START_TRANSACTION"
    COMMIT_TRANSACTION = "COMMIT_TRANSACTION"
    ROLLBACK_TRANSACTION = "ROLLBACK_TRANSACTION"
    SET_AUTOCOMMIT = "SET_AUTOCOMMIT"


class Connector(str, Enum):
    """Logical connector joining the members of a where-group."""

    AND = "AND"
    OR = "OR"


class WhereOperator(str, Enum):
    """Comparison operators accepted in where-tree leaves."""

    EQ = "="
    NE = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    IN = "IN"
    NOT_IN = "NOT IN"
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"
    IS = "IS"
    IS_NOT = "IS NOT"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT BETWEEN"


class SortDirection(str, Enum):
    """Ordering direction for ORDER BY terms and index columns."""

    ASC = "ASC"
    DESC = "DESC"


class ReferentialAction(str, Enum):
    """Foreign key ON DELETE / ON UPDATE actions."""

    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"
