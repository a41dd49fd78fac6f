"""
Comment model: text left by a user on an image.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from .base import Base, utc_now


class Comment(Base):
    """
    Comment model. Removed together with its image.

    Attributes:
        id: Unique identifier for the comment
        text: Comment body
        created_date: When the comment was posted
        user: Author, joined on load
        image: Image the comment belongs to
    """

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(Text, nullable=False)
    created_date = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    image_id = Column(Integer, ForeignKey("images.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", lazy="joined", innerjoin=True)
    image = relationship("Image", back_populates="comments", lazy="raise")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, image_id={self.image_id}, user_id={self.user_id})>"
