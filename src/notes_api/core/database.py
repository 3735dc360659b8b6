"""
Database Configuration

Async SQLAlchemy 2.0 engine, session factory and request-scoped sessions.
Uses asyncpg as the PostgreSQL driver for non-blocking I/O.

Design:
    - Lazy initialization: engine created on first use, not at import.
    - Bounded pool: DB_POOL_SIZE + DB_MAX_OVERFLOW connections at most,
      recycled after DB_POOL_RECYCLE_SECONDS, pre-pinged on checkout so
      stale idle connections are evicted.
    - get_db: FastAPI dependency that yields a request-scoped session.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from notes_api.core.config import settings
from notes_api.models.base import Base

logger = logging.getLogger(__name__)

# Module-level singletons (lazy)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_engine(url: str | None = None) -> AsyncEngine:
    """Create an async engine with the configured pool limits."""
    return create_async_engine(
        url or settings.DATABASE_URL,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
        pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
        pool_pre_ping=True,
        connect_args={"command_timeout": settings.DB_COMMAND_TIMEOUT_SECONDS},
    )


def get_engine() -> AsyncEngine:
    """Get or create the async SQLAlchemy engine (singleton)."""
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = build_engine()
        logger.info(
            "Database engine created: %s@%s (pool_size=%d, max_overflow=%d)",
            settings.POSTGRES_USER or "?",
            settings.POSTGRES_HOST,
            settings.DB_POOL_SIZE,
            settings.DB_MAX_OVERFLOW,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the async session factory (singleton)."""
    global _session_factory  # noqa: PLW0603
    if _session_factory is None:
        # expire_on_commit=False: no implicit I/O after commit
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Yields:
        AsyncSession: Scoped to the request lifecycle. Closed (and any open
        transaction rolled back) after the request completes, including on
        exceptions and cancellation.
    """
    async with get_session_factory()() as session:
        yield session


async def create_schema(engine: AsyncEngine | None = None) -> None:
    """Create tables and indexes that do not exist yet (dev/test bootstrap)."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema ensured: %s", ", ".join(sorted(Base.metadata.tables)))


async def dispose_engine() -> None:
    """Dispose the engine at application shutdown."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database engine disposed")


__all__ = [
    "Base",
    "build_engine",
    "create_schema",
    "dispose_engine",
    "get_db",
    "get_engine",
    "get_session_factory",
]
