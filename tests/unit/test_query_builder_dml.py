"""Unit tests for INSERT, UPDATE and DELETE generation."""

import logging
import re

import pytest

from sybase_dialect.common.exceptions import UnsupportedFeatureError
from sybase_dialect.operations import BulkInsert, Delete, Update
from sybase_dialect.query_builder.sybase.builder import SybaseQueryBuilder
from sybase_dialect.types.capabilities import Supports
from sybase_dialect.types.where import coerce_where


IDENTITY_ATTRIBUTES = {
    "id": {"data_type": "INTEGER", "primary_key": True, "auto_increment": True},
    "name": {"data_type": "STRING"},
    "active": {"data_type": "BOOLEAN"},
}


def _row_tuples(statement):
    return re.findall(r"\(([^()]*)\)", statement.split(" VALUES ", 1)[1])


class TestBulkInsert:
    """Batching, identity handling and typed escaping."""

    def test_single_batch(self, builder):
        sql = builder.build_query(BulkInsert(
            table="t",
            rows=[{"a": 1, "b": "x"}, {"a": 2, "b": "it's"}],
        ))
        assert sql == "INSERT INTO \"t\" (\"a\",\"b\") VALUES (1,'x'),(2,'it''s');"

    def test_four_columns_batch_by_fifty_one(self, builder):
        rows = [{"a": i, "b": i, "c": i, "d": i} for i in range(120)]

        sql = builder.build_query(BulkInsert(table="t", rows=rows))
        statements = [s for s in sql.split(";") if s.strip()]

        assert len(statements) == 3
        assert [len(_row_tuples(s)) for s in statements] == [51, 51, 18]
        first_values = [int(t.split(",")[0]) for s in statements for t in _row_tuples(s)]
        assert first_values == list(range(120))

    def test_single_column_batch_size(self, builder):
        rows = [{"a": i} for i in range(130)]

        sql = builder.build_query(BulkInsert(table="t", rows=rows))
        statements = [s for s in sql.split(";") if s.strip()]

        assert [len(_row_tuples(s)) for s in statements] == [126, 4]

    def test_missing_keys_become_null(self, builder):
        sql = builder.build_query(BulkInsert(table="t", rows=[{"a": 1}, {"b": 2}]))
        assert sql == 'INSERT INTO "t" ("a","b") VALUES (1,NULL),(NULL,2);'

    def test_null_identity_column_is_omitted(self, builder):
        sql = builder.build_query(BulkInsert(
            table="t",
            rows=[{"id": None, "name": "a", "active": True}],
            attributes=IDENTITY_ATTRIBUTES,
        ))
        assert sql == "INSERT INTO \"t\" (\"name\",\"active\") VALUES ('a',1);"

    def test_explicit_identity_value_wraps_output(self, builder):
        sql = builder.build_query(BulkInsert(
            table="t",
            rows=[{"id": 7, "name": "a"}],
            attributes=IDENTITY_ATTRIBUTES,
        ))
        assert sql == (
            'SET TEMPORARY OPTION IDENTITY_INSERT = "t"; '
            "INSERT INTO \"t\" (\"id\",\"name\") VALUES (7,'a'); "
            "SET TEMPORARY OPTION IDENTITY_INSERT = '';"
        )

    def test_identity_only_row_uses_default_values_in_place(self, builder):
        sql = builder.build_query(BulkInsert(
            table="t",
            rows=[{"name": "a"}, {"id": None}, {"name": "b"}],
            attributes=IDENTITY_ATTRIBUTES,
        ))
        assert sql == (
            "INSERT INTO \"t\" (\"name\") VALUES ('a'); "
            'INSERT INTO "t" DEFAULT VALUES; '
            "INSERT INTO \"t\" (\"name\") VALUES ('b');"
        )

    def test_default_values_unsupported_always_raises(self, generator_settings):
        settings = generator_settings.model_copy(update={
            "supports": Supports(default_values=False),
            "strict_features": False,
        })
        with pytest.raises(UnsupportedFeatureError):
            SybaseQueryBuilder(settings).build_query(BulkInsert(
                table="t", rows=[{"id": None}], attributes=IDENTITY_ATTRIBUTES,
            ))


class TestUpdate:

    def test_update_with_where(self, builder):
        sql = builder.build_query(Update(
            table="t",
            values={"name": "x", "active": False},
            where={"id": 3},
            attributes=IDENTITY_ATTRIBUTES,
        ))
        assert sql == "UPDATE \"t\" SET \"name\"='x',\"active\"=0 WHERE \"id\" = 3;"

    def test_update_limit_strict_raises(self, builder):
        with pytest.raises(UnsupportedFeatureError):
            builder.build_query(Update(table="t", values={"a": 1}, limit=5))

    def test_update_limit_lenient_is_dropped(self, lenient_builder, caplog):
        with caplog.at_level(logging.WARNING):
            sql = lenient_builder.build_query(Update(table="t", values={"a": 1}, limit=5))

        assert sql == 'UPDATE "t" SET "a"=1;'
        assert "cannot be row-limited" in caplog.text

    def test_update_limit_when_supported(self, generator_settings):
        settings = generator_settings.model_copy(update={"supports": Supports(limit_on_update=True)})
        sql = SybaseQueryBuilder(settings).build_query(Update(table="t", values={"a": 1}, limit=5))
        assert sql == 'UPDATE TOP(5) "t" SET "a"=1;'

    def test_empty_values_rejected(self):
        with pytest.raises(ValueError):
            Update(table="t", values={})


class TestDelete:
    """Row caps and truncation."""

    def test_default_limit_applied(self, builder):
        sql = builder.build_query(Delete(table="t", where={"id": 5}))
        assert sql == 'DELETE TOP(1) FROM "t" WHERE "id" = 5; SELECT @@ROWCOUNT AS AFFECTEDROWS;'

    def test_explicit_none_limit_is_unbounded(self, builder):
        sql = builder.build_query(Delete(table="t", where={"active": 0}, limit=None))
        assert sql == 'DELETE FROM "t" WHERE "active" = 0; SELECT @@ROWCOUNT AS AFFECTEDROWS;'

    def test_explicit_limit(self, builder):
        sql = builder.build_query(Delete(table="t", limit=10))
        assert sql.startswith('DELETE TOP(10) FROM "t";')

    def test_truncate_ignores_where_and_limit(self, builder):
        sql = builder.build_query(Delete(table="t", where={"id": 5}, limit=3, truncate=True))
        assert sql == 'TRUNCATE TABLE "t";'


class TestWhereRendering:

    def test_null_comparisons(self, builder):
        assert builder.render_where(coerce_where({"column": "a", "operator": "=", "value": None})) == '"a" IS NULL'
        assert builder.render_where(coerce_where({"column": "a", "operator": "!=", "value": None})) == '"a" IS NOT NULL'

    def test_in_list(self, builder):
        assert builder.render_where(coerce_where({"column": "a", "operator": "IN", "value": [1, "b"]})) == "\"a\" IN (1, 'b')"
        assert builder.render_where(coerce_where({"column": "a", "operator": "IN", "value": []})) == '"a" IN (NULL)'

    def test_between(self, builder):
        sql = builder.render_where(coerce_where({"column": "a", "operator": "BETWEEN", "value": [1, 9]}))
        assert sql == '"a" BETWEEN 1 AND 9'

    def test_nested_groups_are_parenthesised(self, builder):
        sql = builder.build_query(Delete(table="t", where=[{"a": 1, "b": 2}, {"c": None}], limit=None))
        assert 'WHERE ("a" = 1 AND "b" = 2) OR "c" IS NULL;' in sql
