"""
Tag model: shared labels referenced by many images.
"""

from sqlalchemy import Column, Integer, String

from .base import Base


class Tag(Base):
    """
    Tag model. Its lifecycle is independent of any single image; images reach
    their tags through the image_tags join table.

    Attributes:
        id: Unique identifier for the tag
        name: Tag label, unique
    """

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
