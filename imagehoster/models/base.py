"""
Declarative base and shared columns for the ImageHoster tables.

Engine and session handling live in imagehoster.core.database.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Timezone-aware current UTC time, used for every timestamp column."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Registry of all tables; ``Base.metadata.create_all`` builds the schema."""


class TimestampMixin:
    """Adds ``created_at`` and ``updated_at`` to users and stored sessions."""

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
