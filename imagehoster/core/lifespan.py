"""
Application lifespan management for FastAPI.

This module provides the lifespan context manager that handles:
- Database connection pool initialization and cleanup
- Optional schema creation for local and test databases
- Removal of expired HTTP sessions at startup
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from imagehoster.core.database import AsyncDBPool
from imagehoster.core.sessions import HttpSessionStore
from imagehoster.main_config import database_config, session_config
from imagehoster.models import Base

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def app_lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Startup:
        - Initialize database connection pool
        - Create tables when DATABASE_CREATE_SCHEMA is set
        - Purge expired sessions

    Shutdown:
        - Cleanup database pool
    """
    await AsyncDBPool.init(database_config)
    if database_config.create_schema:
        await AsyncDBPool.create_all(Base.metadata)

    async with AsyncDBPool.get_session() as session:
        await HttpSessionStore(session, session_config).purge_expired()
        await session.commit()

    logger.info("application_started")

    yield

    await AsyncDBPool.dispose()
    logger.info("application_stopped")
