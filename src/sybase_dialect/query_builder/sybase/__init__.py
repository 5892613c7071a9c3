"""SQL Anywhere query builder."""

from .builder import SybaseQueryBuilder

__all__ = ["SybaseQueryBuilder"]
