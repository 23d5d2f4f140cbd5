"""
PostgreSQL Database Adapter

Used when DATABASE_URL points at postgresql+asyncpg://. Connections are
pooled by SQLAlchemy's default queue pool.
"""

from typing import Any, Optional

from sqlalchemy import String, func, literal
from sqlalchemy.pool import Pool
from sqlalchemy.sql.elements import ColumnElement

from shortener.db.interface import DatabaseAdapter


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter implementation."""

    def get_pool_class(self) -> Optional[type[Pool]]:
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        }

    def substring_match(self, haystack: str, needle: ColumnElement) -> ColumnElement:
        return func.strpos(literal(haystack, type_=String), needle) > 0
