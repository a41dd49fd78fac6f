"""Application error hierarchy and the error body shared by JSON and HTML responses.

Exception Hierarchy:
    AppError (HTTPException)
    ├── ClientError (4xx errors)
    │   ├── BadRequestError (400)
    │   ├── UnauthorizedError (401)
    │   │   └── LoginRequiredError (redirects to the login page)
    │   ├── ForbiddenError (403)
    │   ├── NotFoundError (404)
    │   └── ConflictError (409)
    └── ServerError (5xx errors)
        └── InternalServerError (500)

Usage:
    # Option 1: Pass individual parameters
    raise NotFoundError(message="Image not found", detail={"image_id": 123})

    # Option 2: Pass ErrorResponse object directly
    error = ErrorResponse(error_code="IMAGE_NOT_FOUND", message="Image not found")
    raise NotFoundError(error)

Each class fixes its status code and default message; ``error_code`` defaults
to the class name.
"""

from typing import Any, ClassVar

from fastapi import HTTPException, status
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    success: bool = Field(default=False, description="Always False for errors")
    error_code: str = Field(description="Error code identifier")
    message: str = Field(description="Human-readable error message")
    detail: dict[str, Any] | None = Field(default=None, description="Additional error details")
    path: str | None = Field(default=None, description="Request path where error occurred")


class AppError(HTTPException):
    """Base exception for all application HTTP errors."""

    default_status: ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: ClassVar[str] = "An error occurred"

    def __init__(
        self,
        message: str | ErrorResponse | None = None,
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        if isinstance(message, ErrorResponse):
            error_code, detail, message = message.error_code, message.detail, message.message

        self.message = message or self.default_message
        self.error_code = error_code or type(self).__name__
        super().__init__(status_code=status_code or self.default_status, detail=self.message)
        # HTTPException.__init__ sets detail to the message; keep the structured detail instead
        self.detail = detail

    def to_error_response(self, path: str | None = None) -> ErrorResponse:
        """Convert exception to ErrorResponse object.

        Args:
            path: Request path where error occurred
        """
        return ErrorResponse(
            error_code=self.error_code,
            message=self.message,
            detail=self.detail,
            path=path,
        )


# ============================================================================
# Client Exceptions (4xx)
# ============================================================================


class ClientError(AppError):
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "Client error"


class BadRequestError(ClientError):
    """400: the submitted form or file cannot be used."""

    default_message = "Bad request"


class UnauthorizedError(ClientError):
    default_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class LoginRequiredError(UnauthorizedError):
    """Anonymous access to a page that needs a logged-in user.

    Browsers are redirected to ``login_url``; the handler never renders a body.
    """

    default_message = "Login required"

    def __init__(
        self,
        message: str | ErrorResponse | None = None,
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
        login_url: str = "/users/login",
    ) -> None:
        super().__init__(message, error_code, detail)
        self.login_url = login_url


class ForbiddenError(ClientError):
    """403: the logged-in user does not own the resource."""

    default_status = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ClientError):
    default_status = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ClientError):
    """409: e.g. a username that is already registered."""

    default_status = status.HTTP_409_CONFLICT
    default_message = "Conflict"


# ============================================================================
# Server Exceptions (5xx)
# ============================================================================


class ServerError(AppError):
    default_message = "Server error"


class InternalServerError(ServerError):
    default_message = "Internal server error"
