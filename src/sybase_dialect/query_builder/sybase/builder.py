"""SQL Anywhere query builder.

SQL Anywhere has no ``CREATE TABLE IF NOT EXISTS``, no OFFSET/LIMIT, no
native upsert before MERGE and refuses explicit identity values unless a
session option is set. This builder works around each of those:

- DDL is wrapped in a catalog existence check against ``systable``
- Pagination is emulated with ``ROW_NUMBER() OVER`` in a derived table
- Upserts become ``MERGE`` statements with distinct target/source aliases
- Explicit identity values are bracketed by ``IDENTITY_INSERT`` toggles
"""

import re
from typing import Any, Dict, List, Optional, Set

from sybase_dialect.common.exceptions import (
    ErrorCode,
    invalid_request_error,
    unsupported_feature_error,
)
from sybase_dialect.logging import get_logger
from sybase_dialect.operations import (
    AddIndex,
    BulkInsert,
    ChangeColumn,
    CommitTransaction,
    CreateTable,
    Delete,
    DescribeTable,
    DropTable,
    GetForeignKeys,
    GetPrimaryKeyConstraint,
    RemoveIndex,
    RenameColumn,
    RenameTable,
    RollbackTransaction,
    Select,
    ShowConstraints,
    ShowIndexes,
    ShowTables,
    StartTransaction,
    Update,
    Upsert,
    Version,
)
from sybase_dialect.query_builder.base import BaseQueryBuilder
from sybase_dialect.query_builder.fragments import (
    TableConstraint,
    join_statements,
    wrap_identity_insert,
)
from sybase_dialect.types.columns import ColumnDefinition, IndexField, TableRef
from sybase_dialect.types.data_types import quote_string
from sybase_dialect.types.where import clause_values

logger = get_logger(__name__)

ROW_COUNT_QUERY = "SELECT @@ROWCOUNT AS AFFECTEDROWS;"
DEFAULT_OFFSET_ALIAS = "OffsetTable"


def _underscore(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name).lower()


class SybaseQueryBuilder(BaseQueryBuilder):
    """Query builder for SQL Anywhere.

    Example:
        >>> builder = SybaseQueryBuilder(GeneratorSettings())
        >>> builder.build_query(DropTable(table="users"))
        "if exists(select * from systable where table_name = 'users' and creator = user_id()) then ..."
    """

    # --- DDL --------------------------------------------------------------

    def _build_create_table(self, operation: CreateTable) -> str:
        fragments, _ = self.attributes.attributes_to_sql(operation.columns, operation.table)

        column_sql: List[str] = []
        primary_keys: List[str] = []
        foreign_keys: List[TableConstraint] = []
        for name, fragment in fragments.items():
            quoted = self.quote_identifier(name)
            column_sql.append(f"{quoted} {fragment.to_sql(inline_primary_key=False, inline_reference=False)}")
            if fragment.primary_key:
                primary_keys.append(name)
            if fragment.reference is not None:
                foreign_keys.append(TableConstraint("FOREIGN KEY", (quoted,), fragment.reference))

        constraints: List[TableConstraint] = []
        for unique_key in operation.unique_keys:
            if set(unique_key.fields) == set(primary_keys):
                # The engine rejects a unique index identical to the primary key
                logger.debug(
                    "Skipping unique key matching the primary key",
                    extra={"table": str(operation.table), "unique_key": unique_key.name},
                )
                continue
            constraints.append(
                TableConstraint("UNIQUE", tuple(self.quote_identifier(f) for f in unique_key.fields))
            )
        if primary_keys:
            constraints.append(
                TableConstraint("PRIMARY KEY", tuple(self.quote_identifier(pk) for pk in primary_keys))
            )
        constraints.extend(foreign_keys)

        body = ", ".join(column_sql + [c.to_sql() for c in constraints])
        return (
            f"if not exists({self._table_exists_query(operation.table, select_list=quote_string(''))}) "
            f"then CREATE TABLE {self.quote_table(operation.table)} ({body}) end if;"
        )

    def _build_drop_table(self, operation: DropTable) -> str:
        return (
            f"if exists({self._table_exists_query(operation.table, select_list='*')}) "
            f"then SET TEMPORARY OPTION IDENTITY_INSERT = ''; "
            f"drop table {self.quote_table(operation.table)} ; end if;"
        )

    def _table_exists_query(self, table: TableRef, select_list: str) -> str:
        return (
            f"select {select_list} from systable "
            f"where table_name = {self._catalog_name(table)} and creator = user_id()"
        )

    def _build_rename_table(self, operation: RenameTable) -> str:
        return (
            f"ALTER TABLE {self.quote_table(operation.table)} "
            f"RENAME {self.quote_table(operation.new_table)};"
        )

    def _build_change_column(self, operation: ChangeColumn) -> str:
        fragments, _ = self.attributes.attributes_to_sql(operation.columns, operation.table)

        alterations: List[str] = []
        constraints: List[str] = []
        for name, fragment in fragments.items():
            quoted = self.quote_identifier(name)
            if fragment.reference is not None:
                constraints.append(
                    f"{self.quote_identifier(name + '_foreign_idx')} "
                    f"FOREIGN KEY ({quoted}) {fragment.reference.to_sql()}"
                )
            else:
                alterations.append(f"{quoted} {fragment.to_sql()}")

        # ALTER COLUMN and ADD CONSTRAINT cannot share one clause list
        clauses: List[str] = []
        if alterations:
            clauses.append("ALTER COLUMN " + ", ".join(alterations))
        if constraints:
            clauses.append("ADD CONSTRAINT " + ", ".join(constraints))
        return f"ALTER TABLE {self.quote_table(operation.table)} {' '.join(clauses)};"

    def _build_rename_column(self, operation: RenameColumn) -> str:
        return (
            f"ALTER TABLE {self.quote_table(operation.table)} "
            f"RENAME {self.quote_identifier(operation.old_name)} TO {self.quote_identifier(operation.new_name)};"
        )

    def _build_add_index(self, operation: AddIndex) -> str:
        name = operation.name or _underscore(f"{operation.table.name}_{'_'.join(operation.field_names)}")
        fields = []
        for field in operation.fields:
            if isinstance(field, IndexField) and field.order is not None:
                fields.append(self.render_order(field.name, field.order.value))
            else:
                fields.append(self.quote_identifier(field.name if isinstance(field, IndexField) else field))
        unique = "UNIQUE " if operation.unique else ""
        return (
            f"CREATE {unique}INDEX {self.quote_identifier(name)} "
            f"ON {self.quote_table(operation.table)} ({', '.join(fields)});"
        )

    def _build_remove_index(self, operation: RemoveIndex) -> str:
        name = operation.index_name or _underscore(f"{operation.table.name}_{'_'.join(operation.fields)}")
        return f"DROP INDEX {self.quote_identifier(name)} ON {self.quote_table(operation.table)};"

    # --- catalog ----------------------------------------------------------

    def _catalog_name(self, table: TableRef) -> str:
        if table.schema_name and not self.supports.schemas:
            self._unsupported("schemas", f"Schema '{table.schema_name}' ignored in catalog lookup of '{table.name}'")
        return quote_string(table.name)

    def _build_describe_table(self, operation: DescribeTable) -> str:
        return " ".join([
            'select b.column_name as "Name", d.domain_name as "Type", b.width as "Length",',
            'b.nulls as "isNull", b."default" as "Default",',
            "case when b.\"default\" = 'autoincrement' then 'PRIMARY KEY' else NULL end as \"Constraint\",",
            "case when b.\"default\" = 'autoincrement' then 1 else 0 end as IsIdentity",
            "from SYS.SYSTAB a",
            "inner join SYS.SYSCOLUMN b on (a.table_id = b.table_id)",
            "inner join SYS.SYSDOMAIN d on (b.domain_id = d.domain_id)",
            f"where a.creator = user_id() and a.table_name = {self._catalog_name(operation.table)};",
        ])

    def _build_show_tables(self, operation: ShowTables) -> str:
        return (
            'select table_name as "TABLE_NAME" from sys.systable st '
            "inner join sys.sysuser u on (st.creator = u.user_id) where creator = user_id();"
        )

    def _build_show_indexes(self, operation: ShowIndexes) -> str:
        return " ".join([
            "select sx.index_name, sx.index_type, si.colnames",
            "from sys.sysindex as sx join sys.systable as st on (sx.table_id = st.table_id)",
            "join sys.sysuser as su on (sx.creator = su.user_id)",
            "join sys.sysindexes as si on (si.iname = sx.index_name and si.creator = su.user_name and si.tname = st.table_name)",
            f"where st.table_name = {self._catalog_name(operation.table)} and st.creator = user_id();",
        ])

    def _build_show_constraints(self, operation: ShowConstraints) -> str:
        sql = " ".join([
            'select c.constraint_name as "constraintName", c.constraint_type as "constraintType",',
            't.table_name as "tableName"',
            "from SYS.SYSCONSTRAINT c inner join SYS.SYSTAB t on (c.table_object_id = t.object_id)",
            f"where t.creator = user_id() and t.table_name = {self._catalog_name(operation.table)}",
        ])
        if operation.constraint_name:
            sql += f" and c.constraint_name = {quote_string(operation.constraint_name)}"
        return sql + ";"

    def _build_get_primary_key_constraint(self, operation: GetPrimaryKeyConstraint) -> str:
        sql = " ".join([
            'select t.table_name as "tableName", col.column_name as "columnName",',
            'con.constraint_name as "constraintName"',
            "from SYS.SYSCONSTRAINT con",
            "inner join SYS.SYSTAB t on (con.table_object_id = t.object_id)",
            "inner join SYS.SYSIDX i on (con.ref_object_id = i.object_id)",
            "inner join SYS.SYSIDXCOL ic on (i.table_id = ic.table_id and i.index_id = ic.index_id)",
            "inner join SYS.SYSTABCOL col on (ic.table_id = col.table_id and ic.column_id = col.column_id)",
            "where con.constraint_type = 'P' and t.creator = user_id()",
            f"and t.table_name = {self._catalog_name(operation.table)}",
        ])
        if operation.column_name:
            sql += f" and col.column_name = {quote_string(operation.column_name)}"
        return sql + ";"

    def _build_get_foreign_keys(self, operation: GetForeignKeys) -> str:
        return " ".join([
            'select fk.role as "constraintName", fk.foreign_tname as "tableName",',
            'fk.columns as "columnNames", fk.primary_tname as "referencedTableName"',
            "from SYS.SYSFOREIGNKEYS fk",
            f"where fk.foreign_creator = current user and fk.foreign_tname = {self._catalog_name(operation.table)};",
        ])

    def _build_version(self, operation: Version) -> str:
        return "SELECT PROPERTY('ProductVersion') AS \"version\";"

    # --- DML --------------------------------------------------------------

    def _build_bulk_insert(self, operation: BulkInsert) -> str:
        """Build batched INSERT statements.

        Rows keep their order. A row holding nothing but null identity
        columns becomes ``INSERT ... DEFAULT VALUES`` at its position. Any
        explicit identity value wraps the whole output in the
        IDENTITY_INSERT toggle.
        """
        attributes = self._by_field(operation.attributes)
        identity = {field for field, attr in attributes.items() if attr.auto_increment}
        table_sql = self.quote_table(operation.table)

        columns: List[str] = []
        entries: List[Optional[Dict[str, Any]]] = []
        needs_identity_insert = False
        for row in operation.rows:
            if all(key in identity and value is None for key, value in row.items()):
                entries.append(None)
                continue
            for key, value in row.items():
                if key in identity and value is not None:
                    needs_identity_insert = True
                if key not in columns and not (key in identity and value is None):
                    columns.append(key)
            entries.append(row)

        batch_size = self.settings.max_statement_arguments // (len(columns) + 1) + 1
        column_sql = ",".join(self.quote_identifier(column) for column in columns)

        statements: List[str] = []
        pending: List[str] = []

        def flush() -> None:
            if pending:
                statements.append(f"INSERT INTO {table_sql} ({column_sql}) VALUES {','.join(pending)};")
                pending.clear()

        for entry in entries:
            if entry is None:
                flush()
                statements.append(self._default_values_insert(table_sql))
                continue
            pending.append(
                "(" + ",".join(
                    self.escape(entry.get(column), attributes[column].data_type if column in attributes else None)
                    for column in columns
                ) + ")"
            )
            if len(pending) >= batch_size:
                flush()
        flush()

        sql = join_statements(statements)
        if needs_identity_insert:
            return wrap_identity_insert(sql, table_sql)
        return sql

    def _default_values_insert(self, table_sql: str) -> str:
        if not self.supports.default_values:
            raise unsupported_feature_error(
                "DEFAULT VALUES",
                "Row supplies only a null identity column but the engine has no DEFAULT VALUES insert",
            )
        return f"INSERT INTO {table_sql} DEFAULT VALUES;"

    def _build_update(self, operation: Update) -> str:
        top = None
        if operation.limit:
            if self.supports.limit_on_update:
                top = operation.limit
            else:
                self._unsupported(
                    "LIMIT ON UPDATE",
                    f"UPDATE on '{operation.table}' cannot be row-limited; limit {operation.limit} dropped",
                )
        return self.render_update(operation, top=top) + ";"

    def _build_delete(self, operation: Delete) -> str:
        table_sql = self.quote_table(operation.table)
        if operation.truncate:
            return f"TRUNCATE TABLE {table_sql};"

        limit = operation.resolve_limit(self.settings.default_delete_limit)
        top = f" TOP({limit})" if limit else ""
        sql = f"DELETE{top} FROM {table_sql}"
        where = self.render_where(operation.where)
        if where:
            sql += f" WHERE {where}"
        return join_statements([sql + ";", ROW_COUNT_QUERY])

    def _build_upsert(self, operation: Upsert) -> str:
        model = operation.model
        primary_keys = model.primary_keys
        identity = set(model.auto_increment_fields)
        attributes = self._by_field(model.attributes)

        table_sql = self.quote_table(operation.table)
        target = self.quote_identifier(f"{operation.table.name}_target")
        source = self.quote_identifier(f"{operation.table.name}_source")

        join_columns = self._upsert_join_columns(operation, primary_keys, model.unique_fields)
        join_sql = " AND ".join(
            f"{target}.{self.quote_identifier(c)} = {source}.{self.quote_identifier(c)}" for c in join_columns
        )

        def typed(column: str, value: Any) -> str:
            attribute = attributes.get(column)
            return self.escape(value, attribute.data_type if attribute else None)

        insert_columns = ", ".join(self.quote_identifier(c) for c in operation.insert_values)
        insert_values = ", ".join(typed(c, v) for c, v in operation.insert_values.items())

        # Identity columns can be inserted but never updated
        assignments = [
            f"{target}.{self.quote_identifier(c)} = {typed(c, v)}"
            for c, v in operation.update_values.items()
            if c not in identity
        ]
        matched = f"UPDATE SET {', '.join(assignments)}" if assignments else "SKIP"

        sql = (
            f"MERGE INTO {table_sql} AS {target} "
            f"USING (VALUES({insert_values})) AS {source}({insert_columns}) "
            f"ON {join_sql} "
            f"WHEN MATCHED THEN {matched} "
            f"WHEN NOT MATCHED THEN INSERT ({insert_columns}) VALUES({insert_values});"
        )
        if any(operation.update_values.get(c) is not None for c in identity):
            return wrap_identity_insert(sql, table_sql)
        return sql

    def _upsert_join_columns(self, operation: Upsert, primary_keys: List[str], unique_fields: List[str]) -> List[str]:
        """Pick the MERGE join columns.

        Clauses with a null member are discarded since a partial key does
        not identify one row. The primary key wins when any surviving
        clause touches a primary key column; otherwise the first
        all-unique clause selects the unique attribute set. Each clause
        must be an AND-group of equality leaves.
        """
        clauses = []
        for clause in operation.where:
            values = clause_values(clause)
            if values and all(v is not None for v in values.values()):
                clauses.append(list(values))

        if not clauses:
            raise invalid_request_error(
                "Primary Key or Unique key should be passed to upsert query",
                operation=operation.operation_type.value,
                field="where",
                error_code=ErrorCode.NO_USABLE_KEY,
            )

        keys: Set[str] = set(primary_keys)
        for columns in clauses:
            if keys.intersection(columns):
                return primary_keys

        unique: Set[str] = set(unique_fields)
        for columns in clauses:
            if all(column in unique for column in columns):
                return unique_fields

        raise invalid_request_error(
            f"No upsert clause on '{operation.table}' matches a primary or unique key",
            operation=operation.operation_type.value,
            field="where",
            error_code=ErrorCode.NO_USABLE_KEY,
        )

    @staticmethod
    def _by_field(attributes: Dict[str, ColumnDefinition]) -> Dict[str, ColumnDefinition]:
        return {attr.name or key: attr for key, attr in attributes.items()}

    # --- pagination -------------------------------------------------------

    def _build_select(self, operation: Select) -> str:
        columns = ", ".join(self.quote_column(c) for c in operation.columns) if operation.columns else "*"
        top = f"TOP {operation.limit} " if operation.limit else ""
        table_sql = self.quote_table(operation.table)
        where = self.render_where(operation.where)
        joins = "".join(f" {join}" for join in operation.joins)

        if operation.offset:
            if not self.supports.offset:
                self._unsupported("offset", f"OFFSET on '{operation.table}' dropped")
            else:
                return self._paged_select(operation, columns, top, table_sql, joins, where)

        sql = f"SELECT {top}{columns} FROM {table_sql}"
        if operation.alias:
            sql += f" AS {self.quote_identifier(operation.alias)}"
        sql += joins
        if where:
            sql += f" WHERE {where}"
        if operation.order:
            sql += " ORDER BY " + ", ".join(self.render_order(o.column, o.direction.value) for o in operation.order)
        return sql + ";"

    def _paged_select(self, operation: Select, columns: str, top: str, table_sql: str, joins: str, where: str) -> str:
        """Emulate OFFSET with ROW_NUMBER() over the resolved ordering."""
        if operation.order:
            order = ", ".join(self.render_order(o.column, o.direction.value) for o in operation.order)
        elif operation.primary_key_field:
            order = self.quote_column(operation.primary_key_field)
        else:
            raise invalid_request_error(
                f"Paginated select on '{operation.table}' needs an order or a primary key field",
                operation=operation.operation_type.value,
                field="order",
                error_code=ErrorCode.MISSING_PARAMETER,
            )

        alias = self.quote_identifier(operation.alias or DEFAULT_OFFSET_ALIAS)
        inner = (
            f"SELECT ROW_NUMBER() OVER (ORDER BY {order}) AS row_num, {alias}.* "
            f"FROM {table_sql} AS {alias}{joins}"
        )
        if where:
            inner += f" WHERE {where}"
        return (
            f"SELECT {top}{columns} FROM (SELECT * FROM ({inner}) AS {alias} "
            f"WHERE row_num > {operation.offset}) AS {alias} ORDER BY row_num;"
        )

    # --- transactions -----------------------------------------------------

    def _build_start_transaction(self, operation: StartTransaction) -> str:
        transaction = operation.transaction
        if transaction.is_nested:
            return f"SAVE TRANSACTION {self.quote_identifier(transaction.name)};"
        return "BEGIN TRANSACTION;"

    def _build_commit_transaction(self, operation: CommitTransaction) -> str:
        # Savepoints cannot be committed on their own
        if operation.transaction.is_nested:
            return ""
        return "COMMIT TRANSACTION;"

    def _build_rollback_transaction(self, operation: RollbackTransaction) -> str:
        transaction = operation.transaction
        if transaction.is_nested:
            return f"ROLLBACK TRANSACTION {self.quote_identifier(transaction.name)};"
        return "ROLLBACK TRANSACTION;"
