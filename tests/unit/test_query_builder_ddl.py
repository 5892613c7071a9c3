"""Unit tests for DDL generation."""

import pytest

from sybase_dialect.common.exceptions import InvalidRequestError, UnsupportedFeatureError
from sybase_dialect.operations import (
    AddColumn,
    AddIndex,
    ChangeColumn,
    CreateFunction,
    CreateTable,
    CreateTrigger,
    DropConstraint,
    DropForeignKey,
    DropTable,
    RemoveColumn,
    RemoveIndex,
    RenameColumn,
    RenameTable,
    RenameTrigger,
)
from sybase_dialect.query_builder.sybase.builder import SybaseQueryBuilder
from sybase_dialect.types.capabilities import Supports
from sybase_dialect.types.columns import IndexField, TableRef


class TestCreateTable:
    """Existence-guarded CREATE TABLE."""

    def test_identity_primary_key_table(self, builder):
        sql = builder.build_query(CreateTable(
            table="t",
            columns={
                "id": {"data_type": "INTEGER", "primary_key": True, "auto_increment": True},
                "name": {"data_type": "STRING"},
            },
        ))

        assert sql == (
            "if not exists(select '' from systable where table_name = 't' and creator = user_id()) "
            "then CREATE TABLE \"t\" (\"id\" INTEGER IDENTITY, \"name\" VARCHAR(255), PRIMARY KEY (\"id\")) end if;"
        )

    def test_guard_wraps_body_exactly_once(self, builder):
        sql = builder.build_query(CreateTable(table="t", columns={"id": "INTEGER"}))

        assert sql.count("if not exists(") == 1
        assert sql.count("CREATE TABLE") == 1
        assert sql.endswith(" end if;")

    def test_foreign_keys_are_trailing_constraints(self, builder):
        sql = builder.build_query(CreateTable(
            table="posts",
            columns={
                "id": {"data_type": "INTEGER", "primary_key": True},
                "author_id": {
                    "data_type": "INTEGER",
                    "allow_null": False,
                    "references": {"table": "users", "key": "id", "on_delete": "CASCADE"},
                },
            },
        ))

        assert '"author_id" INTEGER NOT NULL,' in sql
        assert sql.endswith(
            'PRIMARY KEY ("id"), FOREIGN KEY ("author_id") REFERENCES "users" ("id") ON DELETE CASCADE) end if;'
        )

    def test_self_referencing_table_has_no_cascade(self, builder):
        sql = builder.build_query(CreateTable(
            table="node",
            columns={
                "id": {"data_type": "INTEGER", "primary_key": True},
                "parent_id": {
                    "data_type": "INTEGER",
                    "references": {"table": "node", "on_delete": "CASCADE", "on_update": "CASCADE"},
                },
            },
        ))

        assert 'FOREIGN KEY ("parent_id") REFERENCES "node" ("id")' in sql
        assert "ON DELETE" not in sql
        assert "ON UPDATE" not in sql

    def test_unique_key_matching_primary_key_is_skipped(self, builder):
        sql = builder.build_query(CreateTable(
            table="t",
            columns={
                "id": {"data_type": "INTEGER", "primary_key": True},
                "email": {"data_type": "STRING(100)"},
            },
            unique_keys={"uq_pk": ["id"], "uq_email": ["email"]},
        ))

        assert sql.count("UNIQUE") == 1
        assert 'UNIQUE ("email"), PRIMARY KEY ("id")' in sql


class TestDropTable:

    def test_drop_is_guarded_and_resets_identity_insert(self, builder):
        sql = builder.build_query(DropTable(table="t"))

        assert sql == (
            "if exists(select * from systable where table_name = 't' and creator = user_id()) "
            "then SET TEMPORARY OPTION IDENTITY_INSERT = ''; drop table \"t\" ; end if;"
        )

    def test_catalog_literal_is_escaped(self, builder):
        sql = builder.build_query(DropTable(table="o'x"))
        assert "table_name = 'o''x'" in sql
        assert 'drop table "ox" ;' in sql


class TestAlterTable:
    """Column and table alterations."""

    def test_add_column(self, builder):
        sql = builder.build_query(AddColumn(
            table="t",
            column_name="age",
            column={"data_type": "INTEGER", "allow_null": False, "default_value": 0},
        ))
        assert sql == 'ALTER TABLE "t" ADD "age" INTEGER NOT NULL DEFAULT 0;'

    def test_remove_column(self, builder):
        assert builder.build_query(RemoveColumn(table="t", column_name="age")) == 'ALTER TABLE "t" DROP COLUMN "age";'

    def test_change_column_separates_constraints(self, builder):
        sql = builder.build_query(ChangeColumn(
            table="t",
            columns={
                "a": {"data_type": "INTEGER", "allow_null": False},
                "b": {"data_type": "INTEGER", "references": {"table": "u"}},
            },
        ))
        assert sql == (
            'ALTER TABLE "t" ALTER COLUMN "a" INTEGER NOT NULL '
            'ADD CONSTRAINT "b_foreign_idx" FOREIGN KEY ("b") REFERENCES "u" ("id");'
        )

    def test_change_column_without_references(self, builder):
        sql = builder.build_query(ChangeColumn(table="t", columns={"a": "STRING(10)"}))
        assert sql == 'ALTER TABLE "t" ALTER COLUMN "a" VARCHAR(10);'

    def test_rename_column(self, builder):
        sql = builder.build_query(RenameColumn(table="t", old_name="a", new_name="b"))
        assert sql == 'ALTER TABLE "t" RENAME "a" TO "b";'

    def test_rename_table(self, builder):
        sql = builder.build_query(RenameTable(table="a", new_table="b"))
        assert sql == 'ALTER TABLE "a" RENAME "b";'


class TestIndexesAndConstraints:

    def test_add_index_with_default_name(self, builder):
        sql = builder.build_query(AddIndex(
            table="users",
            fields=["lastName", IndexField(name="email", order="DESC")],
            unique=True,
        ))
        assert sql == 'CREATE UNIQUE INDEX "users_last_name_email" ON "users" ("lastName", "email" DESC);'

    def test_remove_index_by_name_and_by_fields(self, builder):
        assert builder.build_query(RemoveIndex(table="t", index_name="idx")) == 'DROP INDEX "idx" ON "t";'
        assert builder.build_query(RemoveIndex(table="t", fields=["a", "b"])) == 'DROP INDEX "t_a_b" ON "t";'

    def test_remove_index_requires_target(self):
        with pytest.raises(ValueError):
            RemoveIndex(table="t")

    def test_drop_foreign_key(self, builder):
        sql = builder.build_query(DropForeignKey(table="t", foreign_key="fk_user"))
        assert sql == 'ALTER TABLE "t" DROP FOREIGN KEY "fk_user";'

    def test_drop_constraint(self, builder):
        sql = builder.build_query(DropConstraint(table="t", constraint_name="ck"))
        assert sql == 'ALTER TABLE "t" DROP CONSTRAINT "ck";'


class TestRoutines:
    """Trigger and function management is rejected outright."""

    @pytest.mark.parametrize("operation_class", [CreateTrigger, RenameTrigger, CreateFunction])
    def test_routines_raise_invalid_request(self, builder, operation_class):
        with pytest.raises(InvalidRequestError):
            builder.build_query(operation_class(name="r", table="t"))


class TestIdentifierQuoting:

    def test_existing_quotes_and_brackets_are_stripped(self, builder):
        assert builder.quote_identifier('na"me') == '"name"'
        assert builder.quote_identifier("[name]") == '"name"'
        assert builder.quote_identifier("it's") == '"its"'

    def test_star_passes_through(self, builder):
        assert builder.quote_identifier("*") == "*"

    @pytest.mark.parametrize("identifier", ["", "\"'[]", "x" * 129])
    def test_invalid_identifiers(self, builder, identifier):
        with pytest.raises(InvalidRequestError):
            builder.quote_identifier(identifier)

    def test_schema_rejected_without_schema_support(self, builder):
        with pytest.raises(UnsupportedFeatureError):
            builder.quote_table(TableRef(name="t", schema_name="dbo"))

    def test_schema_dropped_in_lenient_mode(self, lenient_builder):
        assert lenient_builder.quote_table(TableRef(name="t", schema_name="dbo")) == '"t"'

    def test_schema_prefixed_when_supported(self, generator_settings):
        settings = generator_settings.model_copy(update={"supports": Supports(schemas=True)})
        builder = SybaseQueryBuilder(settings)
        assert builder.quote_table(TableRef(name="t", schema_name="dbo")) == '"dbo"."t"'
