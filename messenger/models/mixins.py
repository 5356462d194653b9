# messenger/models/mixins.py
from datetime import datetime, timezone
import uuid
from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func


def generate_uuid():
    """Generate a UUID string for use as a primary key"""
    return str(uuid.uuid4())


def utc_now():
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Mixin to add created_at and updated_at columns to models"""
    # Python-side defaults keep microsecond resolution, which the store relies on for ordering
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now, nullable=False)


def is_uuid(value) -> bool:
    """Check that a value is a well-formed UUID string"""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
