"""Registry of value parsers applied to fetched rows.

A registry instance is handed to the connection layer at construction.
Parsers are keyed by column type tag and can be registered, refreshed
back to the built-ins, or cleared.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Optional

from sybase_dialect.constants.data_types import DataTypeTag
from sybase_dialect.logging import get_logger

logger = get_logger(__name__)

Parser = Callable[[Any], Any]


def _parse_boolean(value: Any) -> bool:
    return bool(int(value))


def _parse_dateonly(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _parse_uuid(value: Any) -> str:
    return str(value).strip()


BUILTIN_PARSERS: Dict[DataTypeTag, Parser] = {
    DataTypeTag.BOOLEAN: _parse_boolean,
    DataTypeTag.DATEONLY: _parse_dateonly,
    DataTypeTag.DECIMAL: _parse_decimal,
    DataTypeTag.UUID: _parse_uuid,
}


class TypeParserRegistry:
    """Explicit parser registry.

    Example:
        >>> registry = TypeParserRegistry.with_builtins()
        >>> registry.parse(DataTypeTag.BOOLEAN, 1)
        True
        >>> registry.register(DataTypeTag.TEXT, str.strip)
        >>> registry.clear()
    """

    def __init__(self, parsers: Optional[Dict[DataTypeTag, Parser]] = None):
        self._parsers: Dict[DataTypeTag, Parser] = dict(parsers or {})

    @classmethod
    def with_builtins(cls) -> "TypeParserRegistry":
        return cls(BUILTIN_PARSERS)

    def register(self, tag: DataTypeTag, parser: Parser) -> None:
        self._parsers[DataTypeTag(tag)] = parser

    def refresh(self, tags: Iterable[DataTypeTag]) -> None:
        """Reinstall the built-in parser for each tag, dropping overrides."""
        for tag in tags:
            tag = DataTypeTag(tag)
            if tag in BUILTIN_PARSERS:
                self._parsers[tag] = BUILTIN_PARSERS[tag]
            else:
                self._parsers.pop(tag, None)
        logger.debug("Refreshed type parsers", extra={"parser_count": len(self._parsers)})

    def clear(self) -> None:
        self._parsers.clear()

    def get(self, tag: DataTypeTag) -> Optional[Parser]:
        return self._parsers.get(DataTypeTag(tag))

    def parse(self, tag: DataTypeTag, value: Any) -> Any:
        """Apply the parser for ``tag``; NULLs and unregistered tags pass through."""
        if value is None:
            return None
        parser = self.get(tag)
        return parser(value) if parser else value

    def __contains__(self, tag: object) -> bool:
        return tag in self._parsers

    def __len__(self) -> int:
        return len(self._parsers)
