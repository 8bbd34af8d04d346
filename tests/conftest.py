"""
Pytest configuration and fixtures.

WHY: Fixtures provide reusable test setup/teardown logic, reducing
duplication and ensuring consistent test environments.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from subs_aggregator.core.config import Settings
from subs_aggregator.db.session import get_db
from subs_aggregator.domain import SubscriptionRecord
from subs_aggregator.main import create_app
from subs_aggregator.models.base import Base
from tests.factories import SubscriptionFactory
from tests.fakes import InMemorySubscriptionRepository


# Test database URL
# WHY: Using SQLite for tests eliminates external database dependencies.
# StaticPool keeps the single in-memory database alive across connections.
TEST_ASYNC_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, LOG_LEVEL="WARNING")


@pytest_asyncio.fixture
async def db_engine():
    """
    Create a test database engine.

    WHY: Function scope gives each test a fresh, empty database.
    """
    engine = create_async_engine(
        TEST_ASYNC_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session.

    Yields:
        AsyncSession: Database session rolled back after the test
    """
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def app(test_settings):
    """A fresh application per test; the lifespan (real engine) is not run."""
    return create_app(test_settings)


@pytest_asyncio.fixture
async def client(app, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test HTTP client backed by the in-memory database.

    Yields:
        AsyncClient: HTTP client for making test requests
    """

    async def override_get_db():
        """Override database dependency with test session."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def repository() -> InMemorySubscriptionRepository:
    """Empty in-memory repository."""
    return InMemorySubscriptionRepository()


@pytest.fixture
def sample_record() -> SubscriptionRecord:
    """
    A valid record covering all of 2025 at 100 per month.

    WHY: Centralizing test data keeps the billing examples consistent
    across service, DAO and API tests.
    """
    return SubscriptionFactory.build()


@pytest.fixture
def sample_payload() -> dict:
    """JSON body equivalent to ``sample_record``."""
    return {
        "service_name": "Yandex Plus",
        "price": 100,
        "user_id": "u1",
        "start_date": "2025-01-01T00:00:00Z",
        "end_date": "2025-12-31T00:00:00Z",
    }
