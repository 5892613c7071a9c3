"""Column definition rendering.

``AttributeRenderer`` turns a ``ColumnDefinition`` into a
``ColumnFragment``. Caller-supplied definitions are never mutated:
type options the engine rejects are stripped from a normalized copy,
and every adjustment is reported back as a diagnostic string and
logged as a warning.
"""

from dataclasses import replace
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple

from sybase_dialect.constants.data_types import DataTypeTag
from sybase_dialect.logging import get_logger
from sybase_dialect.query_builder.fragments import ColumnFragment, ReferenceFragment
from sybase_dialect.types.columns import ColumnDefinition, TableRef
from sybase_dialect.types.data_types import normalize_data_type, to_sql_type

if TYPE_CHECKING:
    from sybase_dialect.query_builder.base import BaseQueryBuilder

logger = get_logger(__name__)


class AttributeRenderer:
    """Render column definitions for one query builder.

    Example:
        >>> renderer = AttributeRenderer(builder)
        >>> fragment, diagnostics = renderer.render(column, TableRef(name="t"))
        >>> fragment.to_sql()
        'INTEGER NOT NULL IDENTITY'
    """

    def __init__(self, builder: "BaseQueryBuilder"):
        self.builder = builder

    def render(
        self,
        column: ColumnDefinition,
        table: Optional[TableRef] = None,
    ) -> Tuple[ColumnFragment, List[str]]:
        """Render a single column and log any adjustments."""
        fragment, diagnostics = self._render(column, table)
        self._warn(diagnostics, table)
        return fragment, diagnostics

    def attributes_to_sql(
        self,
        columns: Dict[str, ColumnDefinition],
        table: Optional[TableRef] = None,
    ) -> Tuple[Dict[str, ColumnFragment], List[str]]:
        """Render a column map, keeping at most one cascading reference per target table.

        Returns:
            Tuple of (fragments keyed by column name, diagnostics)
        """
        fragments: Dict[str, ColumnFragment] = {}
        diagnostics: List[str] = []
        referenced: Set[str] = set()

        for key, column in columns.items():
            column = column if column.name else column.with_name(key)
            fragment, column_diagnostics = self._render(column, table)
            diagnostics.extend(column_diagnostics)

            reference = fragment.reference
            if reference is not None:
                target = column.references.table
                if target in referenced:
                    if reference.has_actions:
                        diagnostics.append(
                            f"Column '{column.name}' is a second reference to '{target}'; "
                            "ON DELETE/ON UPDATE were removed to avoid multiple cascade paths."
                        )
                        fragment = replace(fragment, reference=reference.without_actions())
                else:
                    referenced.add(target)

            fragments[column.name] = fragment

        self._warn(diagnostics, table)
        return fragments, diagnostics

    def _render(
        self,
        column: ColumnDefinition,
        table: Optional[TableRef],
    ) -> Tuple[ColumnFragment, List[str]]:
        builder = self.builder
        name = column.name or ""
        data_type, diagnostics = normalize_data_type(column.data_type)

        if data_type.tag == DataTypeTag.ENUM:
            values = ", ".join(builder.escape(value) for value in data_type.values)
            type_sql = f"{to_sql_type(data_type)} CHECK ({builder.quote_identifier(name)} IN({values}))"
            return ColumnFragment(name=name, type_sql=type_sql), diagnostics

        nullability = None
        if column.allow_null is False:
            nullability = "NOT NULL"
        elif column.allow_null and not column.primary_key and not column.default_schemable:
            nullability = "NULL"

        default_sql = None
        if column.default_schemable:
            if data_type.is_large_object:
                diagnostics.append(
                    f"{data_type.tag.value} column '{name}' cannot have a default value; DEFAULT was removed."
                )
            else:
                default_sql = builder.escape(column.default_value, data_type)

        reference = None
        if column.references is not None:
            ref = column.references
            reference = ReferenceFragment(
                table_sql=builder.quote_table(TableRef(name=ref.table)),
                key_sql=builder.quote_identifier(ref.key),
                on_delete=ref.on_delete.value if ref.on_delete else None,
                on_update=ref.on_update.value if ref.on_update else None,
            )
            if table is not None and ref.table == table.name and reference.has_actions:
                diagnostics.append(
                    f"Column '{name}' references its own table; self-referential "
                    "ON DELETE/ON UPDATE actions were removed."
                )
                reference = reference.without_actions()

        fragment = ColumnFragment(
            name=name,
            type_sql=to_sql_type(data_type),
            nullability=nullability,
            identity=column.auto_increment,
            default_sql=default_sql,
            unique=column.unique,
            primary_key=column.primary_key,
            reference=reference,
        )
        return fragment, diagnostics

    @staticmethod
    def _warn(diagnostics: List[str], table: Optional[TableRef]) -> None:
        for message in diagnostics:
            logger.warning(message, extra={"table": str(table) if table else None})

