"""Repository layer for database operations.

This module contains concrete repository implementations for
data access operations.
"""

from .comment_repository import CommentRepository
from .http_session_repository import HttpSessionRepository
from .image_repository import ImageRepository
from .tag_repository import TagRepository
from .user_repository import UserRepository

__all__ = [
    "CommentRepository",
    "HttpSessionRepository",
    "ImageRepository",
    "TagRepository",
    "UserRepository",
]
