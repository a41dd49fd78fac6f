"""
ImageHoster application entry point with async lifespan management.

This module initializes the FastAPI application with:
- Structured logging with request correlation IDs
- Async database connection pooling (AsyncDBPool)
- CORS middleware configuration
- Automatic route discovery and registration
- Centralized exception handlers (HTML error page for browsers, JSON otherwise)

Architecture:
    - Logging configured before app creation (JSON/console)
    - Lifespan context manager handles database pool initialization/cleanup
    - Routes are auto-discovered from imagehoster/routes/
    - Pages are rendered from imagehoster/templates/ with Jinja2
    - Configuration is loaded from environment-specific .env files
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from imagehoster.core import app_lifespan, register_routers, setup_logging
from imagehoster.core.exceptions import register_exception_handlers
from imagehoster.main_config import cors_config, fastapi_config, settings

# =============================================================================
# Setup Logging (before app creation)
# =============================================================================
setup_logging()

app = FastAPI(
    title=fastapi_config.title,
    description=fastapi_config.description,
    version=fastapi_config.version,
    docs_url=fastapi_config.docs_url,
    redoc_url=fastapi_config.redoc_url,
    openapi_url=fastapi_config.openapi_url,
    root_path=fastapi_config.root_path,
    lifespan=app_lifespan,
    debug=fastapi_config.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_config.origins_list,
    allow_credentials=cors_config.allow_credentials,
    allow_methods=cors_config.methods_list,
    allow_headers=cors_config.headers_list,
)

# Adds request_id to the logging context
app.add_middleware(
    CorrelationIdMiddleware,
    header_name="X-Request-ID",
    generator=lambda: uuid.uuid4().hex[:16],
    validator=None,
    transformer=lambda x: x,
)

register_exception_handlers(app)

# =============================================================================
# Auto-register all routes
# =============================================================================
register_routers(app)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    # log_config=None keeps uvicorn on our structlog setup
    uvicorn.run(
        "imagehoster.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":
    run()
