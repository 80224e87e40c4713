"""
Centralized Test Configuration.
"""

import random

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from parcel_tracker.app.main import app
from parcel_tracker.app.db.session import Base, get_parcel_store
from parcel_tracker.app.domain.parcels.parcel_service import utc_timestamp
from parcel_tracker.app.models.parcel_enums import ParcelStatus
from parcel_tracker.app.repositories.parcel_store import ParcelStore
from parcel_tracker.app.schemas.parcel import ParcelRecord

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def engine():
    """Fresh in-memory database with the parcel table for each test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def store(engine):
    return ParcelStore(make_session_factory(engine))


@pytest.fixture
async def broken_store():
    """Store over a database where the parcel table was never created."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield ParcelStore(make_session_factory(test_engine))
    await test_engine.dispose()


@pytest.fixture
async def file_store(tmp_path):
    """Store over a file database with a real connection pool, for concurrent callers."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield ParcelStore(make_session_factory(test_engine))

    await test_engine.dispose()


@pytest.fixture
async def client(store):
    """Async client for testing, wired to the per-test store."""
    app.dependency_overrides[get_parcel_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}


@pytest.fixture
def random_client_id():
    return random.randint(1, 10_000_000)


@pytest.fixture
def make_parcel():
    """Factory for registered parcels stamped with the current UTC time."""
    def _make_parcel(client: int = 1000, address: str = "test") -> ParcelRecord:
        return ParcelRecord(
            client=client,
            status=ParcelStatus.REGISTERED.value,
            address=address,
            created_at=utc_timestamp(),
        )

    return _make_parcel
