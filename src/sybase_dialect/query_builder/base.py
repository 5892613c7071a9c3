import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Union

from sybase_dialect.common.exceptions import (
    ErrorCode,
    invalid_request_error,
    unsupported_feature_error,
)
from sybase_dialect.constants.sql import QueryType, WhereOperator
from sybase_dialect.logging import get_logger
from sybase_dialect.operations import (
    AddColumn,
    AddIndex,
    BaseOperation,
    BulkInsert,
    ChangeColumn,
    CommitTransaction,
    CreateTable,
    Delete,
    DescribeTable,
    DropConstraint,
    DropForeignKey,
    DropTable,
    GetForeignKeys,
    GetPrimaryKeyConstraint,
    RemoveColumn,
    RemoveIndex,
    RenameColumn,
    RenameTable,
    RollbackTransaction,
    RoutineOperation,
    Select,
    SetAutocommit,
    ShowConstraints,
    ShowIndexes,
    ShowTables,
    StartTransaction,
    Update,
    Upsert,
    Version,
)
from sybase_dialect.query_builder.attributes import AttributeRenderer
from sybase_dialect.settings.generator import GeneratorSettings
from sybase_dialect.types.columns import ColumnDefinition, TableRef
from sybase_dialect.types.data_types import DataType, to_literal
from sybase_dialect.types.where import WhereCondition, WhereGroup, WhereTree
from sybase_dialect.utils.decorators import traced

logger = get_logger(__name__)

MAX_IDENTIFIER_LENGTH = 128

_STRIPPED_QUOTES = re.compile(r"[\"\[\]']+")


def _span_attributes(self: "BaseQueryBuilder", operation: BaseOperation) -> Dict[str, Any]:
    return {
        "db.system": "sqlanywhere",
        "db.operation": operation.operation_type.value,
        "db.sql.table": str(operation.table) if getattr(operation, "table", None) else None,
    }


class BaseQueryBuilder(ABC):
    """Base interface for query builders.

    Query builders are pure functions from an operation to SQL text. They do
    NOT execute queries; the caller runs the returned statements over a
    connection it owns. Configuration is read once at construction and never
    mutated, so one builder can serve many threads.

    Guarantees:
        1. **Quoting**: every identifier goes through ``quote_identifier``
        2. **Inline values**: values are escaped into literals, no placeholders
        3. **Capability gating**: paths the supports matrix marks false either
           raise ``UnsupportedFeatureError`` or, in lenient mode, drop the
           unsupported part with a warning
    """

    def __init__(self, settings: GeneratorSettings):
        self.settings = settings
        self.supports = settings.supports
        self.quote_char = settings.quote_char
        self.timezone = settings.tzinfo
        self.attributes = AttributeRenderer(self)

    # --- engine specific statements ---------------------------------------

    @abstractmethod
    def _build_create_table(self, operation: CreateTable) -> str:
        """Build an existence-guarded CREATE TABLE statement."""
        pass

    @abstractmethod
    def _build_drop_table(self, operation: DropTable) -> str:
        """Build an existence-guarded DROP TABLE statement."""
        pass

    @abstractmethod
    def _build_rename_table(self, operation: RenameTable) -> str:
        pass

    @abstractmethod
    def _build_change_column(self, operation: ChangeColumn) -> str:
        pass

    @abstractmethod
    def _build_rename_column(self, operation: RenameColumn) -> str:
        pass

    @abstractmethod
    def _build_add_index(self, operation: AddIndex) -> str:
        pass

    @abstractmethod
    def _build_remove_index(self, operation: RemoveIndex) -> str:
        pass

    @abstractmethod
    def _build_bulk_insert(self, operation: BulkInsert) -> str:
        """Build batched INSERT statements.

        Args:
            operation: BulkInsert operation

        Returns:
            One or more INSERT statements joined by a space
        """
        pass

    @abstractmethod
    def _build_delete(self, operation: Delete) -> str:
        pass

    @abstractmethod
    def _build_upsert(self, operation: Upsert) -> str:
        """Build an insert-or-update statement.

        Args:
            operation: Upsert operation

        Returns:
            Engine-native upsert SQL
        """
        pass

    @abstractmethod
    def _build_select(self, operation: Select) -> str:
        pass

    @abstractmethod
    def _build_describe_table(self, operation: DescribeTable) -> str:
        pass

    @abstractmethod
    def _build_show_tables(self, operation: ShowTables) -> str:
        pass

    @abstractmethod
    def _build_show_indexes(self, operation: ShowIndexes) -> str:
        pass

    @abstractmethod
    def _build_show_constraints(self, operation: ShowConstraints) -> str:
        pass

    @abstractmethod
    def _build_get_primary_key_constraint(self, operation: GetPrimaryKeyConstraint) -> str:
        pass

    @abstractmethod
    def _build_get_foreign_keys(self, operation: GetForeignKeys) -> str:
        pass

    @abstractmethod
    def _build_version(self, operation: Version) -> str:
        pass

    @abstractmethod
    def _build_start_transaction(self, operation: StartTransaction) -> str:
        pass

    @abstractmethod
    def _build_commit_transaction(self, operation: CommitTransaction) -> str:
        pass

    @abstractmethod
    def _build_rollback_transaction(self, operation: RollbackTransaction) -> str:
        pass

    # --- generic statements -----------------------------------------------

    def _build_add_column(self, operation: AddColumn) -> str:
        fragment, _ = self.attributes.render(operation.column, operation.table)
        return (
            f"ALTER TABLE {self.quote_table(operation.table)} "
            f"ADD {self.quote_identifier(operation.column_name)} {fragment.to_sql()};"
        )

    def _build_remove_column(self, operation: RemoveColumn) -> str:
        return (
            f"ALTER TABLE {self.quote_table(operation.table)} "
            f"DROP COLUMN {self.quote_identifier(operation.column_name)};"
        )

    def _build_drop_foreign_key(self, operation: DropForeignKey) -> str:
        return (
            f"ALTER TABLE {self.quote_table(operation.table)} "
            f"DROP FOREIGN KEY {self.quote_identifier(operation.foreign_key)};"
        )

    def _build_drop_constraint(self, operation: DropConstraint) -> str:
        return (
            f"ALTER TABLE {self.quote_table(operation.table)} "
            f"DROP CONSTRAINT {self.quote_identifier(operation.constraint_name)};"
        )

    def _build_update(self, operation: Update) -> str:
        """Generic UPDATE renderer: ``UPDATE "t" SET "a"=1,"b"='x' WHERE ...;``."""
        return self.render_update(operation) + ";"

    def render_update(self, operation: Update, top: Optional[int] = None) -> str:
        assignments = ",".join(
            f"{self.quote_identifier(column)}="
            f"{self.escape(value, self._column_type(operation.attributes, column))}"
            for column, value in operation.values.items()
        )
        verb = f"UPDATE TOP({top})" if top else "UPDATE"
        sql = f"{verb} {self.quote_table(operation.table)} SET {assignments}"
        where = self.render_where(operation.where)
        if where:
            sql += f" WHERE {where}"
        return sql

    def _build_set_autocommit(self, operation: SetAutocommit) -> str:
        return ""

    def _reject_routine(self, operation: RoutineOperation) -> str:
        raise invalid_request_error(
            f"{operation.operation_type.value} is not supported by {self.__class__.__name__}",
            operation=operation.operation_type.value,
            error_code=ErrorCode.INVALID_ARGUMENT,
        )

    @traced("sybase_dialect.build_query", attribute_getter=_span_attributes)
    def build_query(self, operation: BaseOperation) -> str:
        """Build SQL query from operation.

        Args:
            operation: Operation to convert to SQL

        Returns:
            SQL text; multi-statement results are joined by a single space

        Raises:
            InvalidRequestError: If the request violates a precondition
            UnsupportedFeatureError: If the request needs a capability the
                engine lacks and strict mode is on
        """
        operation_mapping: Dict[QueryType, Callable[[Any], str]] = {
            QueryType.CREATE_TABLE: self._build_create_table,
            QueryType.DROP_TABLE: self._build_drop_table,
            QueryType.RENAME_TABLE: self._build_rename_table,
            QueryType.ADD_COLUMN: self._build_add_column,
            QueryType.REMOVE_COLUMN: self._build_remove_column,
            QueryType.CHANGE_COLUMN: self._build_change_column,
            QueryType.RENAME_COLUMN: self._build_rename_column,
            QueryType.ADD_INDEX: self._build_add_index,
            QueryType.REMOVE_INDEX: self._build_remove_index,
            QueryType.DROP_FOREIGN_KEY: self._build_drop_foreign_key,
            QueryType.DROP_CONSTRAINT: self._build_drop_constraint,
            QueryType.CREATE_TRIGGER: self._reject_routine,
            QueryType.DROP_TRIGGER: self._reject_routine,
            QueryType.RENAME_TRIGGER: self._reject_routine,
            QueryType.CREATE_FUNCTION: self._reject_routine,
            QueryType.DROP_FUNCTION: self._reject_routine,
            QueryType.RENAME_FUNCTION: self._reject_routine,
            QueryType.DESCRIBE_TABLE: self._build_describe_table,
            QueryType.SHOW_TABLES: self._build_show_tables,
            QueryType.SHOW_INDEXES: self._build_show_indexes,
            QueryType.SHOW_CONSTRAINTS: self._build_show_constraints,
            QueryType.GET_PRIMARY_KEY_CONSTRAINT: self._build_get_primary_key_constraint,
            QueryType.GET_FOREIGN_KEYS: self._build_get_foreign_keys,
            QueryType.VERSION: self._build_version,
            QueryType.SELECT: self._build_select,
            QueryType.BULK_INSERT: self._build_bulk_insert,
            QueryType.UPDATE: self._build_update,
            QueryType.DELETE: self._build_delete,
            QueryType.UPSERT: self._build_upsert,
            QueryType.START_TRANSACTION: self._build_start_transaction,
            QueryType.COMMIT_TRANSACTION: self._build_commit_transaction,
            QueryType.ROLLBACK_TRANSACTION: self._build_rollback_transaction,
            QueryType.SET_AUTOCOMMIT: self._build_set_autocommit,
        }

        builder_method = operation_mapping.get(operation.operation_type)
        if builder_method is None:
            raise invalid_request_error(
                f"Operation type {operation.operation_type} not supported by {self.__class__.__name__}",
                operation=str(operation.operation_type),
            )

        sql = builder_method(operation)
        logger.debug(
            "Built %s statement",
            operation.operation_type.value,
            extra=operation.observability_attributes(),
        )
        return sql

    # --- quoting and escaping ---------------------------------------------

    def quote_identifier(self, identifier: str) -> str:
        """Wrap an identifier in the quote character.

        Existing quote and bracket characters are stripped rather than
        escaped. ``*`` passes through unchanged.

        Raises:
            InvalidRequestError: If the identifier is empty after stripping
                or longer than 128 characters
        """
        if identifier == "*":
            return identifier
        stripped = _STRIPPED_QUOTES.sub("", identifier).replace(self.quote_char, "")
        if not stripped or len(stripped) > MAX_IDENTIFIER_LENGTH:
            raise invalid_request_error(
                f"Invalid identifier: '{identifier}'. "
                f"Identifiers must be 1-{MAX_IDENTIFIER_LENGTH} characters after quote stripping.",
                field="identifier",
                error_code=ErrorCode.INVALID_IDENTIFIER,
            )
        return f"{self.quote_char}{stripped}{self.quote_char}"

    def quote_column(self, column: str) -> str:
        """Quote a possibly qualified column reference such as ``alias.col``."""
        return ".".join(self.quote_identifier(part) for part in column.split("."))

    def quote_table(self, table: Union[TableRef, str]) -> str:
        if isinstance(table, str):
            table = TableRef(name=table)
        quoted = self.quote_identifier(table.name)
        if not table.schema_name:
            return quoted
        if self.supports.schemas:
            return f"{self.quote_identifier(table.schema_name)}.{quoted}"
        self._unsupported("schemas", f"Schema '{table.schema_name}' dropped from table '{table.name}'")
        return quoted

    def escape(self, value: Any, data_type: Optional[DataType] = None) -> str:
        return to_literal(value, data_type, self.timezone)

    @staticmethod
    def _column_type(attributes: Dict[str, ColumnDefinition], column: str) -> Optional[DataType]:
        attribute = attributes.get(column)
        if attribute is None:
            for candidate in attributes.values():
                if candidate.name == column:
                    attribute = candidate
                    break
        return attribute.data_type if attribute is not None else None

    def _unsupported(self, feature: str, message: str) -> None:
        """Raise in strict mode; otherwise warn and let the caller drop the feature."""
        if self.settings.strict_features:
            raise unsupported_feature_error(feature, message)
        logger.warning(message, extra={"feature": feature})

    # --- where rendering --------------------------------------------------

    def render_where(self, where: Optional[WhereTree]) -> str:
        if where is None:
            return ""
        if isinstance(where, WhereCondition):
            return self._render_condition(where)
        return self._render_group(where, nested=False)

    def _render_group(self, group: WhereGroup, nested: bool) -> str:
        parts: List[str] = []
        for item in group.items:
            if isinstance(item, WhereCondition):
                parts.append(self._render_condition(item))
            else:
                rendered = self._render_group(item, nested=True)
                if rendered:
                    parts.append(rendered)
        joined = f" {group.connector.value} ".join(parts)
        if nested and len(parts) > 1:
            return f"({joined})"
        return joined

    def _render_condition(self, condition: WhereCondition) -> str:
        column = self.quote_column(condition.column)
        operator = condition.operator
        value = condition.value

        if value is None:
            if operator in (WhereOperator.EQ, WhereOperator.IS):
                return f"{column} IS NULL"
            if operator in (WhereOperator.NE, WhereOperator.IS_NOT):
                return f"{column} IS NOT NULL"

        if operator in (WhereOperator.IN, WhereOperator.NOT_IN):
            values = list(value) if isinstance(value, (list, tuple, set)) else [value]
            if not values:
                values = [None]
            return f"{column} {operator.value} {self.escape(values)}"

        if operator in (WhereOperator.BETWEEN, WhereOperator.NOT_BETWEEN):
            if not isinstance(value, (list, tuple)) or len(value) != 2:
                raise invalid_request_error(
                    f"{operator.value} on '{condition.column}' needs exactly two values",
                    field=condition.column,
                    error_code=ErrorCode.INVALID_ARGUMENT,
                )
            low, high = value
            return f"{column} {operator.value} {self.escape(low)} AND {self.escape(high)}"

        return f"{column} {operator.value} {self.escape(value)}"

    def render_order(self, column: str, direction: str) -> str:
        return f"{self.quote_column(column)} {direction}"

