"""Unit tests for SELECT generation and row-number pagination."""

import re

import pytest

from sybase_dialect.common.exceptions import ErrorCode, InvalidRequestError, UnsupportedFeatureError
from sybase_dialect.operations import Select
from sybase_dialect.query_builder.sybase.builder import SybaseQueryBuilder
from sybase_dialect.types.capabilities import Supports


def _apply_window(sql, ids):
    """Evaluate the TOP/row_num window of a paged select over ordered ids."""
    top = int(re.match(r"SELECT TOP (\d+) ", sql).group(1))
    offset = int(re.search(r"WHERE row_num > (\d+)\)", sql).group(1))
    numbered = list(enumerate(sorted(ids), start=1))
    return [value for row_num, value in numbered if row_num > offset][:top]


class TestSelect:

    def test_select_star(self, builder):
        assert builder.build_query(Select(table="t")) == 'SELECT * FROM "t";'

    def test_full_select(self, builder):
        sql = builder.build_query(Select(
            table="users",
            columns=["id", "u.email"],
            alias="u",
            where={"id": 1},
            order=[("id", "desc")],
            limit=5,
        ))
        assert sql == 'SELECT TOP 5 "id", "u"."email" FROM "users" AS "u" WHERE "id" = 1 ORDER BY "id" DESC;'

    def test_joins_are_inlined(self, builder):
        sql = builder.build_query(Select(
            table="users",
            alias="u",
            joins=['INNER JOIN "posts" AS "p" ON "p"."author_id" = "u"."id"'],
        ))
        assert sql == 'SELECT * FROM "users" AS "u" INNER JOIN "posts" AS "p" ON "p"."author_id" = "u"."id";'

    def test_order_shorthand(self, builder):
        sql = builder.build_query(Select(table="t", order=["name DESC", "id"]))
        assert sql == 'SELECT * FROM "t" ORDER BY "name" DESC, "id" ASC;'

    def test_zero_offset_is_not_paged(self, builder):
        sql = builder.build_query(Select(table="t", limit=3, offset=0))
        assert sql == 'SELECT TOP 3 * FROM "t";'


class TestPagination:
    """OFFSET emulation through ROW_NUMBER()."""

    def test_primary_key_fallback_ordering(self, builder):
        sql = builder.build_query(Select(table="t", limit=10, offset=20, primary_key_field="id"))

        assert sql == (
            'SELECT TOP 10 * FROM (SELECT * FROM (SELECT ROW_NUMBER() OVER (ORDER BY "id") AS row_num, '
            '"OffsetTable".* FROM "t" AS "OffsetTable") AS "OffsetTable" WHERE row_num > 20) '
            'AS "OffsetTable" ORDER BY row_num;'
        )

    def test_window_returns_rows_after_offset(self, builder):
        sql = builder.build_query(Select(table="t", limit=10, offset=20, primary_key_field="id"))
        assert _apply_window(sql, range(1, 101)) == list(range(21, 31))

    def test_explicit_order_and_where(self, builder):
        sql = builder.build_query(Select(
            table="t",
            alias="x",
            where={"active": 1},
            order=["created DESC"],
            limit=5,
            offset=5,
        ))
        assert 'ROW_NUMBER() OVER (ORDER BY "created" DESC) AS row_num, "x".* FROM "t" AS "x" WHERE "active" = 1)' in sql
        assert sql.endswith('AS "x" WHERE row_num > 5) AS "x" ORDER BY row_num;')

    def test_no_order_and_no_primary_key_raises(self, builder):
        with pytest.raises(InvalidRequestError) as exc_info:
            builder.build_query(Select(table="t", limit=10, offset=20))
        assert exc_info.value.error_code == ErrorCode.MISSING_PARAMETER

    def test_offset_unsupported_strict(self, generator_settings):
        settings = generator_settings.model_copy(update={"supports": Supports(offset=False)})
        with pytest.raises(UnsupportedFeatureError):
            SybaseQueryBuilder(settings).build_query(Select(table="t", offset=5, primary_key_field="id"))

    def test_offset_unsupported_lenient(self, generator_settings):
        settings = generator_settings.model_copy(update={
            "supports": Supports(offset=False),
            "strict_features": False,
        })
        sql = SybaseQueryBuilder(settings).build_query(Select(table="t", limit=2, offset=5, primary_key_field="id"))
        assert sql == 'SELECT TOP 2 * FROM "t";'

    @pytest.mark.parametrize("value", [0, -1])
    def test_invalid_limit(self, value):
        with pytest.raises(ValueError):
            Select(table="t", limit=value)
