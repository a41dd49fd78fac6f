"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.base_repository import BaseRepository
from imagehoster.models.user import User


class UserRepository(BaseRepository[User, int]):
    """Repository for User entity operations.

    The profile is joined whenever a user is loaded.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize UserRepository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(User, session)

    async def find_by_username(self, username: str) -> User | None:
        """Find a user by exact username.

        Args:
            username: Login name

        Returns:
            User instance or None if not found
        """
        return await self.get_by(username=username)

    async def username_exists(self, username: str) -> bool:
        """Check if a username is already registered."""
        result = await self.session.execute(
            select(self.model.id).where(self.model.username == username)
        )
        return result.scalar_one_or_none() is not None
