"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: Backend-specific implementations
- Database: engine + session factory bound to one connection string
- get_session: FastAPI dependency yielding a per-request session
"""

from shortener.db.interface import DatabaseAdapter
from shortener.db.session import Database, get_database_adapter, get_session

__all__ = [
    "DatabaseAdapter",
    "Database",
    "get_database_adapter",
    "get_session",
]
