"""Tag repository for database operations."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.base_repository import BaseRepository
from imagehoster.models.tag import Tag


class TagRepository(BaseRepository[Tag, int]):
    """Repository for Tag entity operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Tag, session)

    async def find_by_names(self, names: Iterable[str]) -> list[Tag]:
        """Find all tags whose name is in ``names``."""
        names = list(names)
        if not names:
            return []
        result = await self.session.execute(select(self.model).where(self.model.name.in_(names)))
        return list(result.scalars().all())
