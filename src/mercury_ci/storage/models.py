"""SQLAlchemy models for the key-value store."""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase

from ..models.timestamps import utc_now


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class KeyValueModel(Base):
    """One serialized collection blob per key."""
    __tablename__ = "kv_store"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
