"""Exception handlers for the ImageHoster application.

Provides centralized exception handling with standardized error responses.
Browsers (``Accept: text/html``) get the ``error.html`` page, other clients
get the JSON ErrorResponse.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.exc import IntegrityError

from imagehoster.core.templating import templates

from .http_exceptions import AppError, ErrorResponse, InternalServerError, LoginRequiredError

logger = logging.getLogger(__name__)


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


def _error_response(request: Request, status_code: int, error_response: ErrorResponse) -> Response:
    if _wants_html(request):
        return templates.TemplateResponse(
            request,
            "error.html",
            {"error": error_response, "status_code": status_code},
            status_code=status_code,
        )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def app_exception_handler(request: Request, exc: AppError) -> Response:
    """Handle custom AppError and its subclasses.

    Args:
        request: FastAPI request
        exc: Application exception

    Returns:
        Response with standardized error format
    """
    return _error_response(request, exc.status_code, exc.to_error_response(path=request.url.path))


async def login_required_handler(request: Request, exc: LoginRequiredError) -> RedirectResponse:
    """Send anonymous visitors to the login page."""
    logger.debug("Login required for %s", request.url.path)
    return RedirectResponse(exc.login_url, status_code=status.HTTP_303_SEE_OTHER)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """Handle request/form validation errors (422).

    Args:
        request: FastAPI request
        exc: Validation error

    Returns:
        Response with validation error details
    """
    error_response = ErrorResponse(
        error_code="ValidationError",
        message="Request validation failed",
        detail={"errors": exc.errors()},
        path=request.url.path,
    )
    return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, error_response)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> Response:
    """Handle SQLAlchemy IntegrityError (database constraints).

    Args:
        request: FastAPI request
        exc: Integrity error

    Returns:
        Response with constraint violation details
    """
    logger.error(f"Database integrity error: {exc}", exc_info=True)

    error_response = ErrorResponse(
        error_code="IntegrityError",
        message="Database constraint violation",
        detail={"database_error": str(exc.orig) if hasattr(exc, "orig") else str(exc)},
        path=request.url.path,
    )
    return _error_response(request, status.HTTP_409_CONFLICT, error_response)


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected exceptions (500).

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        Response with generic error message
    """
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    internal_exc = InternalServerError(
        message="An unexpected error occurred",
        detail={"error": str(exc)} if logger.isEnabledFor(logging.DEBUG) else None,
    )
    return _error_response(
        request, internal_exc.status_code, internal_exc.to_error_response(path=request.url.path)
    )


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(LoginRequiredError, login_required_handler)
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
