"""
Social API Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite) with
       the full schema, so services run real SQL without a PostgreSQL
       server.

Fixture Hierarchy:
    db_engine            in-memory engine + create_all (per test)
    ├── db_session       AsyncSession for service-level tests
    └── test_client      HTTPX AsyncClient against create_app(), with
                         get_db_session overridden to use db_engine
    temp_storage         temporary directory for file operations
    sample_image_bytes   minimal PNG bytes
    make_actor           builds an Actor value without a token round-trip
"""

import os
import tempfile
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before anything imports social_api.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="social_api_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["ENFORCE_OWNERSHIP"] = "false"

from social_api.database import Base, get_db_session  # noqa: E402
from social_api.services.access_gate import Actor  # noqa: E402
import social_api.models  # noqa: E402,F401


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    A private in-memory database per test.

    StaticPool keeps the single connection alive for the engine's lifetime;
    with the default pool every checkout would see an empty database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; let
    # SQLAlchemy emit BEGIN itself so first-or-create's savepoint works
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for service-level tests.

    Services only flush; the test decides whether to commit.
    """
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client for endpoint tests.

    Each request gets its own session on the test engine and commits or
    rolls back exactly like the production dependency.
    """
    from social_api.main import create_app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Data Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Smallest useful PNG: signature + IHDR chunk header bytes."""
    return (
        b"\x89PNG\r\n\x1a\n"
        b"\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00"
        b"\x1f\x15\xc4\x89"
    )


@pytest.fixture
def make_actor():
    """
    Build an Actor directly.

    Usage:
        actor = make_actor(profile_id=profile.id)
    """
    def _make(user_id: int = 1, profile_id=None, email: str = "actor@example.com") -> Actor:
        return Actor(
            user_id=user_id,
            name="actor",
            email=email,
            token_id=1,
            profile_id=profile_id,
        )
    return _make
