"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite, the default
backend for local development, tests and single-instance deployments.

Key characteristics:
- File-based (single .db file)
- Single writer at a time (file locking), so every write statement is atomic
- LIKE is case-insensitive for ASCII, so substring tests use instr() instead
"""

from typing import Any

from sqlalchemy import String, func, literal
from sqlalchemy.pool import NullPool
from sqlalchemy.sql.elements import ColumnElement

from shortener.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """SQLite database adapter implementation."""

    def get_pool_class(self) -> type[NullPool]:
        """
        SQLite uses NullPool: a file-based database gains nothing from
        pooling and every session opens its own connection.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def substring_match(self, haystack: str, needle: ColumnElement) -> ColumnElement:
        # instr() is case-sensitive and has no wildcard characters
        return func.instr(literal(haystack, type_=String), needle) > 0
