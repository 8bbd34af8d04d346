"""
Database engine and session management.

WHY: Async sessions match FastAPI's async handlers. The engine is built
explicitly from Settings during application startup and kept on
``app.state``; nothing connects at import time.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from subs_aggregator.core.config import Settings
from subs_aggregator.core.exceptions import StorageError
from subs_aggregator.models.base import Base


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    pool_pre_ping recycles stale connections; pool sizes are modest since a
    request holds one connection for a single short query.
    """
    return create_async_engine(
        settings.async_database_url,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create the session factory bound to ``engine``.

    expire_on_commit=False keeps loaded attributes readable after commit.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create missing tables from the model metadata (DB_CREATE_TABLES)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get a database session for one request.

    Commits when the handler succeeds and rolls back when it raises.

    Raises:
        StorageError: If the application was started without a database
    """
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise StorageError(message="database is not initialized")

    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            raise StorageError(cause=exc, operation="commit") from exc
        except Exception:
            await session.rollback()
            raise
