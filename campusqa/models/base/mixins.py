"""
SQLAlchemy model mixins for reusable functionality.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func


def utcnow() -> datetime:
    """Timezone-aware current time used for Python-side defaults."""
    return datetime.now(timezone.utc)


class CreatedAtMixin:
    """
    Mixin for immutable records.

    Provides only created_at; rows using it are never updated in place.
    """

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
        comment="Record creation timestamp (UTC)"
    )


class TimestampMixin(CreatedAtMixin):
    """
    Mixin for automatic timestamp tracking.

    Adds updated_at on top of created_at.
    """

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        comment="Record last update timestamp (UTC)"
    )
