"""Image repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.interfaces import ORMOption

from imagehoster.core.base_repository import BaseRepository
from imagehoster.models.comment import Comment
from imagehoster.models.image import Image


class ImageRepository(BaseRepository[Image, int]):
    """Repository for Image entity operations.

    The owning user is always joined. Tags and comments are only fetched by
    the methods that say so.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ImageRepository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(Image, session)

    async def list_newest_first(self) -> list[Image]:
        """Get all images with their owners, most recent first."""
        query = select(self.model).order_by(self.model.date.desc(), self.model.id.desc())
        result = await self.session.execute(query)
        return list(result.unique().scalars().all())

    async def get_with_tags(self, image_id: int) -> Image | None:
        """Get an image with its tags loaded."""
        return await self._get_loaded(image_id, selectinload(self.model.tags))

    async def get_with_details(self, image_id: int) -> Image | None:
        """Get an image with its tags and comments (and comment authors) loaded.

        Args:
            image_id: Primary key

        Returns:
            Image instance or None if not found
        """
        return await self._get_loaded(
            image_id,
            selectinload(self.model.tags),
            selectinload(self.model.comments).joinedload(Comment.user),
        )

    async def _get_loaded(self, image_id: int, *options: ORMOption) -> Image | None:
        # populate_existing so relations are loaded even if the image is already in the session
        result = await self.session.execute(
            select(self.model)
            .where(self.model.id == image_id)
            .options(*options)
            .execution_options(populate_existing=True)
        )
        return result.unique().scalar_one_or_none()
