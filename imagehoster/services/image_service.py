"""Image listing, upload, edit and delete."""

import base64

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from imagehoster.models.base import utc_now
from imagehoster.models.image import Image
from imagehoster.repository.image_repository import ImageRepository
from imagehoster.services.tag_service import TagService

logger = structlog.get_logger(__name__)

CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
}
ALLOWED_EXTENSIONS = frozenset(CONTENT_TYPES)

EDIT_OWNER_ERROR = "Only the owner of the image can edit the image"
DELETE_OWNER_ERROR = "Only the owner of the image can delete the image"


def allowed_file(filename: str | None) -> bool:
    return bool(filename) and "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def content_type_for(filename: str) -> str:
    """MIME type of an allowed image file, from its extension."""
    return CONTENT_TYPES[filename.rsplit(".", 1)[1].lower()]


def encode_image(data: bytes) -> str:
    """Base64 text stored in images.image_file."""
    return base64.b64encode(data).decode("ascii")


class ImageService:
    """Image operations on top of ImageRepository and TagService.

    Callers own the transaction: nothing here commits.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.images = ImageRepository(session)
        self.tag_service = TagService(session)

    async def get_all_images(self) -> list[Image]:
        """Every image with its owner, newest first."""
        return await self.images.list_newest_first()

    async def get_image(self, image_id: int) -> Image:
        """Image with owner, tags and comments.

        Raises:
            NotFoundError: If no image has this id
        """
        image = await self.images.get_with_details(image_id)
        if image is None:
            raise NotFoundError(message="Image not found", detail={"image_id": image_id})
        return image

    async def get_image_for_edit(self, image_id: int, user_id: int) -> Image:
        """Image with its tags, checked for ownership.

        Raises:
            NotFoundError: If no image has this id
            ForbiddenError: If ``user_id`` does not own the image
        """
        image = await self.images.get_with_tags(image_id)
        if image is None:
            raise NotFoundError(message="Image not found", detail={"image_id": image_id})
        self._ensure_owner(image, user_id, EDIT_OWNER_ERROR)
        return image

    async def upload_image(
        self,
        owner_id: int,
        title: str,
        description: str | None,
        tags: str | None,
        filename: str | None,
        content: bytes,
    ) -> Image:
        """Store a new image owned by ``owner_id``.

        Raises:
            BadRequestError: If the file is missing or not an allowed image type
        """
        self._check_file(filename, content)

        image = Image(
            title=title,
            description=description,
            image_file=encode_image(content),
            content_type=content_type_for(filename),
            date=utc_now(),
            user_id=owner_id,
            tags=await self.tag_service.find_or_create_tags(tags),
        )
        await self.images.add(image)
        logger.info("image_uploaded", image_id=image.id, user_id=owner_id, size=len(content))
        return image

    async def update_image(
        self,
        image_id: int,
        user_id: int,
        title: str,
        description: str | None,
        tags: str | None,
        filename: str | None = None,
        content: bytes | None = None,
    ) -> Image:
        """Replace an image's details; an empty upload keeps the stored file.

        Raises:
            NotFoundError: If no image has this id
            ForbiddenError: If ``user_id`` does not own the image
            BadRequestError: If a replacement file is not an allowed image type
        """
        image = await self.get_image_for_edit(image_id, user_id)

        if content:
            self._check_file(filename, content)
            image.image_file = encode_image(content)
            image.content_type = content_type_for(filename)
        image.title = title
        image.description = description
        image.date = utc_now()
        image.tags = await self.tag_service.find_or_create_tags(tags)

        await self.session.flush()
        logger.info("image_updated", image_id=image.id, user_id=user_id)
        return image

    async def delete_image(self, image_id: int, user_id: int) -> None:
        """Delete an image and its comments; tags are left in place.

        Raises:
            NotFoundError: If no image has this id
            ForbiddenError: If ``user_id`` does not own the image
        """
        image = await self.images.get_by_id(image_id)
        if image is None:
            raise NotFoundError(message="Image not found", detail={"image_id": image_id})
        self._ensure_owner(image, user_id, DELETE_OWNER_ERROR)

        await self.images.delete(image_id)
        logger.info("image_deleted", image_id=image_id, user_id=user_id)

    @staticmethod
    def _ensure_owner(image: Image, user_id: int, message: str) -> None:
        if image.user_id != user_id:
            logger.warning("image_owner_mismatch", image_id=image.id, user_id=user_id)
            raise ForbiddenError(message=message, detail={"image_id": image.id})

    @staticmethod
    def _check_file(filename: str | None, content: bytes) -> None:
        if not content:
            raise BadRequestError(message="Please choose an image file to upload", error_code="EMPTY_FILE")
        if not allowed_file(filename):
            raise BadRequestError(
                message="Only png, jpg, jpeg and gif files are allowed",
                error_code="FILE_TYPE_NOT_ALLOWED",
                detail={"filename": filename},
            )
