"""
Server-side HTTP sessions addressed by a cookie.

The browser only ever holds an opaque random token. Rows in ``http_sessions``
are keyed by the token's SHA-256 digest and hold the session attributes as a
JSON object.

Handlers receive the loaded ``HttpSession`` explicitly (see
``imagehoster.core.dependencies``) and persist changes through the store:

    http_session[SESSION_USER_KEY] = user_record
    await store.rotate(http_session)
    await store.save(http_session, response)
    await db.commit()

Concurrent requests of one session are not coordinated: the last save wins.
"""

import hashlib
import secrets
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from fastapi import Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.main_config import SessionConfig
from imagehoster.repository.http_session_repository import HttpSessionRepository

__all__ = ["SESSION_USER_KEY", "HttpSession", "HttpSessionStore", "hash_token"]

logger = structlog.get_logger(__name__)

SESSION_USER_KEY = "loggeduser"


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class HttpSession:
    """Key/value attributes of one browser session."""

    def __init__(self, token: str | None, data: dict[str, Any] | None = None) -> None:
        self.token = token
        self.data: dict[str, Any] = dict(data or {})
        self.modified = False
        self.invalidated = False
        self.token_issued = False
        # set by HttpSessionStore.load when it deleted the expired row the cookie named
        self.discarded_expired = False

    @property
    def is_new(self) -> bool:
        return self.token is None

    @property
    def session_id(self) -> str | None:
        return hash_token(self.token) if self.token else None

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value
        self.modified = True

    def __delitem__(self, key: str) -> None:
        del self.data[key]
        self.modified = True

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def clear(self) -> None:
        self.data.clear()
        self.modified = True


class HttpSessionStore:
    """Loads, saves and destroys sessions in the ``http_sessions`` table."""

    def __init__(self, db: AsyncSession, config: SessionConfig) -> None:
        self.db = db
        self.config = config
        self.records = HttpSessionRepository(db)

    def _expiry(self) -> datetime:
        return datetime.now(UTC) + timedelta(seconds=self.config.max_age_seconds)

    async def load(self, request: Request) -> HttpSession:
        """Session for the request's cookie; a new empty one if missing, unknown or expired.

        An expired row is deleted (flushed only) and the returned session has
        ``discarded_expired`` set so the caller can commit the removal.
        """
        token = request.cookies.get(self.config.cookie_name)
        if not token:
            return HttpSession(token=None)

        record = await self.records.get_by_id(hash_token(token))
        if record is None:
            return HttpSession(token=None)

        if _as_utc(record.expires_at) <= datetime.now(UTC):
            await self.records.delete(record.id)
            logger.debug("session_expired", session_id=record.id[:8])
            http_session = HttpSession(token=None)
            http_session.discarded_expired = True
            return http_session

        return HttpSession(token=token, data=record.data)

    async def save(self, http_session: HttpSession, response: Response) -> None:
        """Persist modified attributes and issue the cookie for a newly created session.

        Empty new sessions are never stored. An invalidated session gets its cookie
        cleared. Changes are flushed; the caller commits.
        """
        if http_session.invalidated:
            self._clear_cookie(response)
            return
        if not (http_session.modified or http_session.token_issued):
            return
        if http_session.is_new and not http_session.data:
            return

        if http_session.is_new:
            http_session.token = secrets.token_urlsafe(32)
            http_session.token_issued = True

        session_id = http_session.session_id
        record = await self.records.get_by_id(session_id)
        if record is None:
            await self.records.create(id=session_id, data=dict(http_session.data), expires_at=self._expiry())
        else:
            record.data = dict(http_session.data)
            record.expires_at = self._expiry()
            await self.db.flush()

        http_session.modified = False
        if http_session.token_issued:
            self._set_cookie(response, http_session.token)

    async def rotate(self, http_session: HttpSession) -> None:
        """Move the session's attributes to a fresh token, dropping the old row."""
        if http_session.token is not None:
            await self.records.delete(http_session.session_id)
        http_session.token = secrets.token_urlsafe(32)
        http_session.token_issued = True
        http_session.modified = True

    async def invalidate(self, http_session: HttpSession) -> None:
        """Destroy the whole session: every attribute and the row.

        The cookie is cleared by the next save().
        """
        if http_session.token is not None:
            await self.records.delete(http_session.session_id)
        http_session.data.clear()
        http_session.token = None
        http_session.invalidated = True
        logger.debug("session_invalidated")

    async def purge_expired(self) -> int:
        """Delete expired rows; returns how many were removed."""
        removed = await self.records.delete_expired(datetime.now(UTC))
        if removed:
            logger.info("sessions_purged", count=removed)
        return removed

    def _set_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            self.config.cookie_name,
            token,
            max_age=self.config.max_age_seconds,
            path="/",
            secure=self.config.cookie_secure,
            httponly=True,
            samesite=self.config.cookie_samesite,
        )

    def _clear_cookie(self, response: Response) -> None:
        response.delete_cookie(
            self.config.cookie_name,
            path="/",
            secure=self.config.cookie_secure,
            httponly=True,
            samesite=self.config.cookie_samesite,
        )
