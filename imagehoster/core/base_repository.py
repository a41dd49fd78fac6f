"""
Generic async repository for the ImageHoster models.

Relationships that are not eager by default must be requested at the call site:

    repo = ImageRepository(session)
    image = await repo.get_by_id(image_id, options=[selectinload(Image.tags)])

Repositories only flush. Committing is left to whoever owns the request's
session (the route handler, through ``get_db``).

Usage:
    class UserRepository(BaseRepository[User, int]):
        async def find_by_username(self, username: str) -> User | None:
            return await self.get_by(username=username)

    async with AsyncDBPool.get_session() as session:
        tag = await TagRepository(session).create(name="sunset")
        await session.commit()
"""

from abc import ABC
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

__all__ = ["BaseRepository"]

ModelType = TypeVar("ModelType")
IDType = TypeVar("IDType", int, str)


class BaseRepository(Generic[ModelType, IDType], ABC):
    """Flush-only CRUD helpers shared by every repository."""

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

    async def create(self, **kwargs: Any) -> ModelType:
        """Insert a row built from ``kwargs`` and return it with defaults populated."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self._flush()
        await self.session.refresh(instance)
        return instance

    async def add(self, instance: ModelType) -> ModelType:
        """Persist an already constructed instance (e.g. with related objects attached)."""
        self.session.add(instance)
        await self._flush()
        return instance

    async def get_by_id(
        self, id: IDType, options: Sequence[ORMOption] = ()
    ) -> ModelType | None:
        """Get a row by primary key.

        Args:
            id: Primary key
            options: Loader options, e.g. selectinload(Model.relation)

        Returns:
            Instance or None
        """
        return await self.get_by(options, id=id)

    async def get_by(self, options: Sequence[ORMOption] = (), **filters: Any) -> ModelType | None:
        """Get the single row whose columns equal ``filters``."""
        query = select(self.model).options(*options)
        for field, value in filters.items():
            query = query.where(getattr(self.model, field) == value)
        result = await self.session.execute(query)
        # unique() is required once a joined eager load is involved
        return result.unique().scalar_one_or_none()

    async def delete(self, id: IDType) -> bool:
        """Delete a row by primary key; dependent rows go through the database's ON DELETE rules.

        Returns:
            True if a row was deleted
        """
        try:
            result = await self.session.execute(delete(self.model).where(self.model.id == id))
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        await self._flush()
        return result.rowcount > 0

    async def exists(self, id: IDType) -> bool:
        result = await self.session.execute(select(self.model.id).where(self.model.id == id))
        return result.scalar_one_or_none() is not None
