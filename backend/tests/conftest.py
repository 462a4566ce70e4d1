"""
Happy Thoughts API: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all
       tests. Every test gets its own in-memory SQLite database, so tests
       never see each other's rows.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine: in-memory aiosqlite engine with the schema created
    │   ├── db_session: one AsyncSession (store/service tests)
    │   │   ├── thought_store: SqlThoughtStore over db_session
    │   │   └── user_store: SqlUserStore over db_session
    │   └── test_client: HTTPX AsyncClient wired to the app, each request
    │       getting its own session on db_engine
    ├── mock_thought_store / mock_user_store: AsyncMock stores (no DB)
    └── ada / bob: Identity values for ownership tests
"""

import os

# Override settings for testing BEFORE any happythoughts imports:
# `settings`, the engine and the bcrypt context are built at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AUTO_CREATE_TABLES"] = "false"

import uuid
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from happythoughts.database import Base, get_db_session
from happythoughts.models import thought as _thought_model  # noqa: F401
from happythoughts.models import user as _user_model  # noqa: F401
from happythoughts.schemas.user import Identity
from happythoughts.stores.base import ThoughtStore, UserStore
from happythoughts.stores.sql import SqlThoughtStore, SqlUserStore


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    A fresh in-memory database per test.

    StaticPool keeps a single connection open, so every session opened on
    this engine sees the same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def thought_store(db_session) -> SqlThoughtStore:
    return SqlThoughtStore(db_session)


@pytest.fixture
def user_store(db_session) -> SqlUserStore:
    return SqlUserStore(db_session)


# ══════════════════════════════════════════════════════════════════════════
# Mock Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_thought_store():
    """
    An AsyncMock that satisfies the ThoughtStore interface.

    Usage:
        mock_thought_store.get_by_id.return_value = thought
        await service.delete_thought(mock_thought_store, str(thought.id), bob)
        mock_thought_store.delete_by_id.assert_not_awaited()
    """
    return AsyncMock(spec=ThoughtStore)


@pytest.fixture
def mock_user_store():
    return AsyncMock(spec=UserStore)


@pytest.fixture
def ada() -> Identity:
    return Identity(id=uuid.uuid4(), username="ada")


@pytest.fixture
def bob() -> Identity:
    return Identity(id=uuid.uuid4(), username="bob")


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to the FastAPI app.
    How:     Uses ASGITransport to route requests directly to the app, and
             swaps `get_db_session` for one bound to the per-test engine
             (same commit/rollback behaviour as production).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from happythoughts.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def register(client: AsyncClient, username: str, password: str = "secret123") -> str:
    """Register a user through the API and return its access token."""
    response = await client.post(
        "/register", json={"username": username, "password": password}
    )
    assert response.status_code == 201, response.text
    return response.json()["accessToken"]


@pytest.fixture
def register_user():
    """The `register` helper as a fixture, so test modules need no conftest import."""
    return register
