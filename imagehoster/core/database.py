"""
Async SQLAlchemy connection pool and database session management.

This module provides a singleton connection pool manager for async SQLAlchemy operations.
It handles database connections with connection pooling, health checks,
and automatic cleanup.

Key Features:
    - Singleton pattern for global connection pool management
    - Async-only operations (no blocking database calls)
    - Connection pool with configurable size and overflow (server databases only)
    - Pre-ping health checks to avoid stale connections
    - Automatic rollback on exceptions
    - Optional schema creation from model metadata (local and test runs)

Usage:
    # Initialize once at application startup (in lifespan)
    await AsyncDBPool.init(database_config)

    # Use in route handlers or services
    async with AsyncDBPool.get_session() as session:
        result = await session.execute(select(Image))
        images = result.scalars().all()
        await session.commit()

    # Cleanup at shutdown (in lifespan)
    await AsyncDBPool.dispose()
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from imagehoster.main_config import DatabaseConfig

logger = structlog.get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class AsyncDBPool:
    """Async-only SQLAlchemy engine + session manager.

    Usage:
        await AsyncDBPool.init(DatabaseConfig())

        async with AsyncDBPool.get_session() as session:
            result = await session.execute(select(Image))
            images = result.scalars().all()

        await AsyncDBPool.dispose()
    """

    _engine: AsyncEngine | None = None
    _maker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    async def init(
        cls,
        config: DatabaseConfig,
    ) -> None:
        """Initialize async engine and sessionmaker.

        Args:
            config: DatabaseConfig instance with credentials and pool settings
        """
        if cls._engine is not None:
            return  # already initialized

        engine_kwargs: dict[str, Any] = {"echo": config.echo}
        # SQLite uses its own pool implementation; sizing arguments apply to server databases only
        if not config.is_sqlite:
            engine_kwargs.update(
                pool_size=config.pool_size,
                max_overflow=config.max_overflow,
                pool_timeout=config.pool_timeout,
                pool_recycle=config.pool_recycle,
                pool_pre_ping=config.pool_pre_ping,
            )

        cls._engine = create_async_engine(config.url, **engine_kwargs)
        if config.is_sqlite:
            event.listen(cls._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        cls._maker = async_sessionmaker(cls._engine, expire_on_commit=False, class_=AsyncSession)
        logger.info("database_pool_initialized", dialect=cls._engine.dialect.name)

    @classmethod
    async def create_all(cls, metadata: MetaData) -> None:
        """Create all tables known to ``metadata`` (no migrations)."""
        if cls._engine is None:
            raise RuntimeError("AsyncDBPool not initialized. Call await AsyncDBPool.init() first.")

        async with cls._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("database_schema_created", tables=sorted(metadata.tables))

    @classmethod
    async def dispose(cls) -> None:
        """Dispose engine and clear session maker.

        Should be called during application shutdown to cleanly close
        all database connections.
        """
        if cls._engine is not None:
            await cls._engine.dispose()
            cls._engine = None
            cls._maker = None

    @classmethod
    @asynccontextmanager
    async def get_session(cls) -> AsyncIterator[AsyncSession]:
        """Yield a session; rollback on exceptions.

        Raises:
            RuntimeError: If pool not initialized
        """
        if cls._maker is None:
            raise RuntimeError("AsyncDBPool not initialized. Call await AsyncDBPool.init() first.")

        async with cls._maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
