"""
Shared fixtures.

Service and store tests run against a throwaway SQLite file per test; API
tests build their own application from the same settings.
"""

import pytest
from fastapi.testclient import TestClient

from shortener.core.setting import Settings
from shortener.db.session import Database
from shortener.main import create_app
from shortener.services.moderation_store import SQLModerationStore
from shortener.services.redirect_service import RedirectService
from shortener.services.redirect_store import SQLRedirectStore

TOKEN = "s3cret"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def config(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        BASE_URL="http://sho.rt",
        TOKEN=TOKEN,
        MAX_ID_ATTEMPTS=10,
    )


@pytest.fixture
async def database(config):
    database = Database.from_url(config.DATABASE_URL)
    await database.create_tables()
    yield database
    await database.dispose()


@pytest.fixture
async def session(database):
    async with database.session_maker() as session:
        yield session


@pytest.fixture
def redirect_store(session) -> SQLRedirectStore:
    return SQLRedirectStore(session)


@pytest.fixture
def moderation_store(session, database) -> SQLModerationStore:
    return SQLModerationStore(session, database.adapter)


@pytest.fixture
def service(redirect_store, moderation_store, config) -> RedirectService:
    return RedirectService(redirect_store, moderation_store, config)


@pytest.fixture
def client(config):
    with TestClient(create_app(config)) as client:
        yield client
