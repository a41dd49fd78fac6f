"""HTTP session repository for database operations."""

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.base_repository import BaseRepository
from imagehoster.models.http_session import HttpSessionRecord


class HttpSessionRepository(BaseRepository[HttpSessionRecord, str]):
    """Repository for server-side session rows."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(HttpSessionRecord, session)

    async def delete_expired(self, now: datetime) -> int:
        """Delete every session that expired before ``now``.

        Returns:
            Number of rows deleted
        """
        result = await self.session.execute(
            delete(self.model).where(self.model.expires_at < now)
        )
        await self.session.flush()
        return result.rowcount
