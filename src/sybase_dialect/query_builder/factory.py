"""Query Builder Factory.

This module provides a factory for creating query builders configured
from environment settings.
"""

from typing import Optional

from sybase_dialect.query_builder.base import BaseQueryBuilder
from sybase_dialect.query_builder.sybase.builder import SybaseQueryBuilder
from sybase_dialect.settings.generator import GeneratorSettings


class QueryBuilderFactory:
    """Factory for creating query builders.

    Example:
        >>> builder = QueryBuilderFactory.create()
        >>> lenient = QueryBuilderFactory.create(GeneratorSettings(strict_features=False))
    """

    @staticmethod
    def create_sybase_builder(settings: Optional[GeneratorSettings] = None) -> SybaseQueryBuilder:
        """Create a SQL Anywhere query builder.

        Args:
            settings: Generator settings; read from the environment when omitted

        Returns:
            Configured SybaseQueryBuilder instance
        """
        if settings is None:
            from sybase_dialect.settings import get_settings
            settings = get_settings().generator

        return SybaseQueryBuilder(settings)

    @staticmethod
    def create(settings: Optional[GeneratorSettings] = None) -> BaseQueryBuilder:
        return QueryBuilderFactory.create_sybase_builder(settings)


def get_query_builder(settings: Optional[GeneratorSettings] = None) -> BaseQueryBuilder:
    """Convenience function to get a query builder."""
    return QueryBuilderFactory.create(settings)
