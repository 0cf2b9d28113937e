"""
Key/value table holding whole-state JSON blobs.
"""

from sqlalchemy import JSON, Column, DateTime, String

from .base import Base, utcnow


class StateBlob(Base):
    """One persisted state blob per storage key."""

    __tablename__ = "state_blobs"

    key = Column(String(255), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
