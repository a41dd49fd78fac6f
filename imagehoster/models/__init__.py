"""
SQLAlchemy models for the ImageHoster application.
"""

from .base import Base
from .comment import Comment
from .http_session import HttpSessionRecord
from .image import Image, image_tags
from .tag import Tag
from .user import User, UserProfile

__all__: list[str] = [
    "Base",
    "Comment",
    "HttpSessionRecord",
    "Image",
    "Tag",
    "User",
    "UserProfile",
    "image_tags",
]
