"""Test cases for exception handling system."""

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from pydantic import BaseModel

from imagehoster.core.exceptions import (
    BadRequestError,
    ConflictError,
    ErrorResponse,
    ForbiddenError,
    InternalServerError,
    LoginRequiredError,
    NotFoundError,
    UnauthorizedError,
    register_exception_handlers,
)

HTML = {"Accept": "text/html,application/xhtml+xml"}


@pytest.fixture
def app() -> FastAPI:
    """Create test FastAPI application."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client that returns 500 responses instead of re-raising."""
    return TestClient(app, raise_server_exceptions=False)


# =============================================================================
# Test ErrorResponse Model
# =============================================================================


def test_error_response_model_defaults() -> None:
    """Test ErrorResponse model with defaults."""
    error = ErrorResponse(error_code="TEST", message="Test")

    assert error.success is False
    assert error.detail is None
    assert error.path is None


def test_error_response_validation_error() -> None:
    """Test ErrorResponse validation for invalid detail type."""
    with pytest.raises(Exception):  # Pydantic ValidationError
        ErrorResponse(
            error_code="TEST",
            message="Test",
            detail="invalid_string",  # Should be dict
        )


# =============================================================================
# Test Exception Classes (JSON clients)
# =============================================================================


def test_not_found_error_with_params(app: FastAPI, client: TestClient) -> None:
    """Test NotFoundError with individual parameters."""

    @app.get("/images/{image_id}")
    async def route(image_id: int):
        raise NotFoundError(
            message="Image not found", error_code="IMAGE_NOT_FOUND", detail={"image_id": image_id}
        )

    response = client.get("/images/123")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "IMAGE_NOT_FOUND"
    assert data["message"] == "Image not found"
    assert data["detail"] == {"image_id": 123}
    assert data["path"] == "/images/123"


@pytest.mark.parametrize(
    ("exc_class", "expected_status"),
    [
        (BadRequestError, status.HTTP_400_BAD_REQUEST),
        (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
        (ForbiddenError, status.HTTP_403_FORBIDDEN),
        (ConflictError, status.HTTP_409_CONFLICT),
        (InternalServerError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    ],
)
def test_error_class_status_and_code(
    app: FastAPI, client: TestClient, exc_class: type, expected_status: int
) -> None:
    """Each error class maps to its status code and defaults error_code to its name."""

    @app.get("/test-error")
    async def route():
        raise exc_class(message="Something went wrong")

    response = client.get("/test-error")

    assert response.status_code == expected_status
    data = response.json()
    assert data["error_code"] == exc_class.__name__
    assert data["message"] == "Something went wrong"


def test_forbidden_error_with_error_response(app: FastAPI, client: TestClient) -> None:
    """Test ForbiddenError with ErrorResponse object."""

    @app.post("/test-error-response")
    async def route():
        error = ErrorResponse(
            error_code="NOT_IMAGE_OWNER",
            message="Only the owner of the image can delete the image",
            detail={"image_id": 456},
        )
        raise ForbiddenError(error)

    response = client.post("/test-error-response")

    assert response.status_code == status.HTTP_403_FORBIDDEN
    data = response.json()
    assert data["error_code"] == "NOT_IMAGE_OWNER"
    assert data["detail"] == {"image_id": 456}


def test_not_found_error_default_message(app: FastAPI, client: TestClient) -> None:
    """Test NotFoundError with default message."""

    @app.get("/test-default")
    async def route():
        raise NotFoundError()

    data = client.get("/test-default").json()
    assert data["message"] == "Not found"
    assert data["error_code"] == "NotFoundError"
    assert "detail" not in data  # Excluded when None


# =============================================================================
# Test HTML Error Pages
# =============================================================================


def test_browser_gets_error_page(app: FastAPI, client: TestClient) -> None:
    """Browsers asking for HTML get the rendered error page with the same status."""

    @app.get("/images/{image_id}")
    async def route(image_id: int):
        raise NotFoundError(message="Image not found")

    response = client.get("/images/9", headers=HTML)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.headers["content-type"].startswith("text/html")
    assert "Image not found" in response.text


def test_login_required_redirects_to_login(app: FastAPI, client: TestClient) -> None:
    """Anonymous visitors are sent to the login page instead of getting a 401 body."""

    @app.get("/images")
    async def route():
        raise LoginRequiredError()

    response = client.get("/images", headers=HTML, follow_redirects=False)

    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert response.headers["location"] == "/users/login"


# =============================================================================
# Test Generic Exception Handler
# =============================================================================


def test_generic_exception_handler(app: FastAPI, client: TestClient) -> None:
    """Test generic exception handler for unexpected errors."""

    @app.get("/test-unexpected")
    async def route():
        msg = "Unexpected error"
        raise ValueError(msg)

    response = client.get("/test-unexpected")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error_code"] == "InternalServerError"
    assert data["message"] == "An unexpected error occurred"
    assert "path" in data


def test_generic_exception_html_page(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-zero-division")
    async def route():
        return 1 / 0

    response = client.get("/test-zero-division", headers=HTML)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "An unexpected error occurred" in response.text


# =============================================================================
# Test Validation Error Handler
# =============================================================================


def test_validation_error_handler(app: FastAPI, client: TestClient) -> None:
    """Test Pydantic validation error handling."""

    class CommentIn(BaseModel):
        text: str
        image_id: int

    @app.post("/test-validation")
    async def route(data: CommentIn):
        return data

    response = client.post("/test-validation", json={"text": "Nice", "image_id": "invalid"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    data = response.json()
    assert data["error_code"] == "ValidationError"
    assert data["message"] == "Request validation failed"
    assert "errors" in data["detail"]


def test_exception_to_error_response_conversion() -> None:
    """Test converting exception to ErrorResponse."""
    exc = NotFoundError(
        message="Image not found", error_code="IMAGE_NOT_FOUND", detail={"image_id": 789}
    )

    error_response = exc.to_error_response(path="/images/789/Sunset")

    assert isinstance(error_response, ErrorResponse)
    assert error_response.error_code == "IMAGE_NOT_FOUND"
    assert error_response.detail == {"image_id": 789}
    assert error_response.path == "/images/789/Sunset"
