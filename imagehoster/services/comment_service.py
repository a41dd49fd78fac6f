"""Comments on images."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.exceptions import NotFoundError
from imagehoster.models.comment import Comment
from imagehoster.repository.comment_repository import CommentRepository
from imagehoster.repository.image_repository import ImageRepository

logger = structlog.get_logger(__name__)


class CommentService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.comments = CommentRepository(session)
        self.images = ImageRepository(session)

    async def create_comment(self, image_id: int, user_id: int, text: str) -> Comment:
        """Add a comment by ``user_id`` to an image.

        Raises:
            NotFoundError: If the image does not exist
        """
        if not await self.images.exists(image_id):
            raise NotFoundError(message="Image not found", detail={"image_id": image_id})

        comment = await self.comments.create(image_id=image_id, user_id=user_id, text=text)
        logger.info("comment_created", comment_id=comment.id, image_id=image_id, user_id=user_id)
        return comment
