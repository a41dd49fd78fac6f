"""Service layer: validation and orchestration over the repositories."""

from .comment_service import CommentService
from .image_service import ImageService
from .password_policy import is_valid_password
from .tag_service import TagService
from .user_service import UserService

__all__ = ["CommentService", "ImageService", "TagService", "UserService", "is_valid_password"]
