"""Settings module for sybase_dialect.

Configuration is built on pydantic-settings and split by concern:

    - generator.py: SQL generation behavior and the capability matrix
      (prefix ``SYBASE_GENERATOR_``)
    - connection.py: ODBC connection and pool configuration
      (prefix ``SYBASE_``)
    - main.py: aggregator with the ``get_settings()`` singleton

Nested values use a double underscore, e.g. ``GENERATOR__SUPPORTS__SCHEMAS=true``.

Quick Start:
    >>> from sybase_dialect.settings import get_settings
    >>> settings = get_settings()
    >>> settings.connection.port
    2638
"""

from .base import DialectBaseSettings
from .connection import ConnectionSettings
from .generator import GeneratorSettings
from .main import _Settings, _reload_settings, get_settings

Settings = _Settings

__all__ = [
    "DialectBaseSettings",
    "ConnectionSettings",
    "GeneratorSettings",
    "Settings",
    "get_settings",
    "_reload_settings",
]
