"""Comment repository for database operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.base_repository import BaseRepository
from imagehoster.models.comment import Comment


class CommentRepository(BaseRepository[Comment, int]):
    """Repository for Comment entity operations.

    Comments of one image are read through ImageRepository.get_with_details.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Comment, session)
