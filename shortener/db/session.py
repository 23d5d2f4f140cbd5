"""
Database Session Management

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Adapter picked from the DATABASE_URL scheme (SQLite or PostgreSQL)
- One engine and session factory per application, kept on app.state
- Async session per request: commit on success, rollback on exception
"""

from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

# Registers the tables on SQLModel.metadata
from shortener.db import models  # noqa: F401
from shortener.db.interface import DatabaseAdapter
from shortener.db.postgres_adapter import PostgreSQLAdapter
from shortener.db.sqlite_adapter import SQLiteAdapter


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Returns:
        DatabaseAdapter instance

    Raises:
        ValueError: If the URL names an unsupported backend
    """
    if database_url.startswith("sqlite"):
        return SQLiteAdapter()
    if database_url.startswith("postgresql"):
        return PostgreSQLAdapter()
    raise ValueError(f"Unsupported database URL: {database_url}")


@dataclass
class Database:
    """Engine, session factory and adapter bound to one DATABASE_URL."""

    adapter: DatabaseAdapter
    engine: AsyncEngine
    session_maker: async_sessionmaker

    @classmethod
    def from_url(cls, database_url: str) -> "Database":
        adapter = get_database_adapter(database_url)
        engine = adapter.create_engine(database_url)
        session_maker = async_sessionmaker(
            engine,
            class_=SQLModelAsyncSession,
            expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
            autoflush=False,
        )
        return cls(adapter=adapter, engine=engine, session_maker=session_maker)

    async def create_tables(self) -> None:
        """Create any missing tables (alembic manages real deployments)."""
        async with self.engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session from the application's factory
    - Yields it to the endpoint
    - Commits on success, rolls back on exception
    """
    database: Database = request.app.state.database
    async with database.session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
