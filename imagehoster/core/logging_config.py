"""Structured logging for ImageHoster.

structlog renders every record, including those from stdlib loggers
(SQLAlchemy, uvicorn): a colored key/value console locally and one JSON
object per line with LOG_FORMAT=json. Records emitted while a request is
being handled carry its ``request_id`` from asgi-correlation-id.

Usage:
    from imagehoster.core.logging_config import setup_logging
    setup_logging()  # Call once at app startup

    logger = structlog.get_logger(__name__)
    logger.info("image_uploaded", image_id=12, user_id=3)
"""

import importlib.util
import logging
import sys
from typing import Any

import structlog
from asgi_correlation_id import correlation_id

from imagehoster.main_config import LogFormat, LoggingConfig, logging_config

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def get_request_id(_logger: Any, _method_name: str, event_dict: dict) -> dict:
    """Add request_id from asgi-correlation-id contextvar to log events."""
    request_id = correlation_id.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def _renderer(config: LoggingConfig) -> Any:
    if config.format == LogFormat.JSON:
        return structlog.processors.JSONRenderer()
    # Colors only when rich (dev dependency) is installed
    return structlog.dev.ConsoleRenderer(colors=importlib.util.find_spec("rich") is not None)


def _logger_levels(config: LoggingConfig) -> dict[str, str]:
    level = config.level.upper()
    return {
        "": level,
        "uvicorn": level,
        "uvicorn.error": level,
        "uvicorn.access": config.level_uvicorn_access.upper(),
        "sqlalchemy.engine": config.level_sqlalchemy.upper(),
    }


def setup_logging(config: LoggingConfig = logging_config) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Call this once before creating the FastAPI app.
    """
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        get_request_id,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(config),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # uvicorn installs its own handlers; replace them so its records are rendered the same way
    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(handler)
        uvicorn_logger.propagate = False

    for name, level in _logger_levels(config).items():
        logging.getLogger(name).setLevel(level)

    structlog.get_logger(__name__).info(
        "logging_configured",
        log_format=config.format.value,
        log_level=config.level.upper(),
    )
