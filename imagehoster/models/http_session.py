"""
Server-side HTTP session storage.
"""

from sqlalchemy import JSON, Column, DateTime, String

from .base import Base, TimestampMixin


class HttpSessionRecord(Base, TimestampMixin):
    """
    One browser session's key/value data.

    Attributes:
        id: SHA-256 hex digest of the session cookie token
        data: JSON object holding the session attributes
        expires_at: Time after which the session is discarded
    """

    __tablename__ = "http_sessions"

    id = Column(String(64), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<HttpSessionRecord(id='{self.id[:8]}...', expires_at={self.expires_at})>"
