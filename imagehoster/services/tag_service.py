"""Shared tag vocabulary."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.models.tag import Tag
from imagehoster.repository.tag_repository import TagRepository

logger = structlog.get_logger(__name__)


def parse_tag_names(raw: str | None) -> list[str]:
    """Split a comma separated tag string into unique, non-empty names (input order kept)."""
    if not raw:
        return []
    names: list[str] = []
    for part in raw.split(","):
        name = part.strip()
        if name and name not in names:
            names.append(name)
    return names


class TagService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.tags = TagRepository(session)

    async def find_or_create_tags(self, raw: str | None) -> list[Tag]:
        """Resolve a comma separated tag string to Tag rows, creating unknown names.

        Existing tags are reused so one Tag can be shared by many images.
        """
        names = parse_tag_names(raw)
        existing = {tag.name: tag for tag in await self.tags.find_by_names(names)}

        resolved: list[Tag] = []
        for name in names:
            tag = existing.get(name)
            if tag is None:
                tag = await self.tags.create(name=name)
                logger.debug("tag_created", tag_id=tag.id, name=name)
            resolved.append(tag)
        return resolved
