"""Shared test fixtures.

Each test gets a fresh SQLite database file (via aiosqlite) with the schema
built from the ORM metadata. Redis is never initialized, so rate limiting
passes requests through.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from igo.config import get_settings
from igo.database import close_db, create_tables, init_db, session_scope
from igo.main import create_app


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch) -> Iterator[None]:
    """Point settings at a throwaway database and disable startup side effects."""
    monkeypatch.setenv("IGO_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'igo_test.db'}")
    monkeypatch.setenv("IGO_RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("IGO_SEED_ON_STARTUP", "false")
    monkeypatch.setenv("IGO_LOG_FORMAT", "console")
    monkeypatch.setenv("IGO_TIMEZONE", "UTC")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    await init_db(get_settings().database_url)
    await create_tables()
    yield
    await close_db()


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to a fresh app instance."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service-level tests and assertions."""
    async with session_scope() as session:
        yield session

