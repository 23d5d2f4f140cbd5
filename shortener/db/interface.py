"""
Database Abstraction Interface

This module defines the database abstraction layer that allows switching between
different database backends (SQLite, PostgreSQL) without changing the stores.

Besides engine configuration, each adapter supplies the dialect-specific pieces
of SQL the stores need, such as the case-sensitive substring test used by the
word blacklist.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import Pool
from sqlalchemy.sql.elements import ColumnElement


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Register it in get_database_adapter() (shortener.db.session)
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine options (override adapter defaults)

        Returns:
            Configured AsyncEngine instance
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        pool_class = self.get_pool_class()
        if pool_class is not None:
            engine_kwargs.setdefault("poolclass", pool_class)

        return create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """
        Get the connection pool class for this database type.

        Returns:
            Pool class, or None to use the SQLAlchemy default
        """

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Connection arguments specific to this database type."""

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Additional engine configuration specific to this database type."""

    @abstractmethod
    def substring_match(self, haystack: str, needle: ColumnElement) -> ColumnElement:
        """
        Build a boolean SQL expression that is true when the value of the
        ``needle`` column occurs inside ``haystack``.

        The comparison must be case-sensitive and must not treat any
        character of the needle as a wildcard.
        """
