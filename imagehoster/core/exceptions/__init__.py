"""Exception handling package for the ImageHoster application.

Provides custom exception hierarchy and handlers for standardized error responses.
"""

from .handlers import register_exception_handlers
from .http_exceptions import (
    AppError,
    BadRequestError,
    ClientError,
    ConflictError,
    ErrorResponse,
    ForbiddenError,
    InternalServerError,
    LoginRequiredError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
)

__all__ = [
    # Base exceptions
    "AppError",
    # Client exceptions (4xx)
    "BadRequestError",
    "ClientError",
    "ConflictError",
    # Models
    "ErrorResponse",
    "ForbiddenError",
    # Server Error (5xx)
    "InternalServerError",
    "LoginRequiredError",
    "NotFoundError",
    "ServerError",
    "UnauthorizedError",
    # Handlers
    "register_exception_handlers",
]
