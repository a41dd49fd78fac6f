"""
Image model storing uploaded images inline as base64 text.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from .base import Base, utc_now

# Many-to-many join between images and the shared tag vocabulary.
# Deleting an image removes its rows here, never the tags themselves.
image_tags = Table(
    "image_tags",
    Base.metadata,
    Column("image_id", Integer, ForeignKey("images.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Image(Base):
    """
    Image model representing an uploaded image.

    Attributes:
        id: Unique identifier for the image
        title: Title shown in listings and URLs
        image_file: Base64 encoded file content
        content_type: MIME type of the file, derived from its extension
        description: Free-text description
        date: Upload (or last edit) time
        user: Owning user, always joined when the image is loaded
        tags: Shared tags; load with selectinload(Image.tags)
        comments: Comments; load with selectinload(Image.comments), deleted with the image
    """

    __tablename__ = "images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    image_file = Column(Text, nullable=False)
    content_type = Column(String(50), nullable=False, default="image/png")
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", back_populates="images", lazy="joined", innerjoin=True)
    tags = relationship(
        "Tag",
        secondary=image_tags,
        lazy="raise",
        passive_deletes=True,
        order_by="Tag.name",
    )
    comments = relationship(
        "Comment",
        back_populates="image",
        cascade="all, delete-orphan",
        lazy="raise",
        passive_deletes=True,
        order_by="Comment.created_date",
    )

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, title='{self.title}', user_id={self.user_id})>"

    @property
    def data_url(self) -> str:
        """Inline ``data:`` URL used as the ``src`` of the rendered image."""
        return f"data:{self.content_type};base64,{self.image_file}"
