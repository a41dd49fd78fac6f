"""
FastAPI dependency injection functions for database sessions, HTTP sessions and services.

Usage in routes:
    @router.get("/images")
    async def images(
        db: AsyncSession = Depends(get_db),
        loggeduser: LoggedUser = Depends(require_logged_user),
    ):
        ...

Testing with dependency override:
    app.dependency_overrides[get_db] = override_get_db

FastAPI caches dependencies per request, so the HTTP session store, the
loaded HTTP session and the services all share the one AsyncSession that
``get_db`` yields.
"""

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.main_config import session_config
from imagehoster.services.comment_service import CommentService
from imagehoster.services.image_service import ImageService
from imagehoster.services.schemas import LoggedUser
from imagehoster.services.user_service import UserService

from .database import AsyncDBPool
from .exceptions import LoginRequiredError
from .sessions import SESSION_USER_KEY, HttpSession, HttpSessionStore


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency for async database session.

    Provides a database session that automatically handles cleanup
    and rollback on errors.
    """
    async with AsyncDBPool.get_session() as session:
        yield session


def get_session_store(db: AsyncSession = Depends(get_db)) -> HttpSessionStore:
    return HttpSessionStore(db, session_config)


async def get_http_session(
    request: Request, store: HttpSessionStore = Depends(get_session_store)
) -> HttpSession:
    """The HTTP session named by the request's cookie (new and empty if none).

    Removal of an expired session row is committed here, since read-only
    pages never commit.
    """
    http_session = await store.load(request)
    if http_session.discarded_expired:
        await store.db.commit()
    return http_session


def get_logged_user(http_session: HttpSession = Depends(get_http_session)) -> LoggedUser | None:
    """The user stored under ``loggeduser``, or None for anonymous sessions."""
    record = http_session.get(SESSION_USER_KEY)
    if record is None:
        return None
    return LoggedUser.model_validate(record)


def require_logged_user(loggeduser: LoggedUser | None = Depends(get_logged_user)) -> LoggedUser:
    """Like get_logged_user but redirects anonymous visitors to the login page.

    Raises:
        LoginRequiredError: If nobody is logged in for this session
    """
    if loggeduser is None:
        raise LoginRequiredError()
    return loggeduser


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_image_service(db: AsyncSession = Depends(get_db)) -> ImageService:
    return ImageService(db)


def get_comment_service(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db)
