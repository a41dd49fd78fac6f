"""
Core infrastructure components for the application.

This module contains database configuration, base classes,
the HTTP session store and route discovery.
"""

from .base_repository import BaseRepository
from .database import AsyncDBPool
from .lifespan import app_lifespan
from .logging_config import setup_logging
from .route_discovery import RouterDiscoveryError, discover_routers, register_routers
from .sessions import SESSION_USER_KEY, HttpSession, HttpSessionStore

__all__ = [
    "SESSION_USER_KEY",
    "AsyncDBPool",
    "BaseRepository",
    "HttpSession",
    "HttpSessionStore",
    "RouterDiscoveryError",
    "app_lifespan",
    "discover_routers",
    "register_routers",
    "setup_logging",
]
