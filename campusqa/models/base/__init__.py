"""
Base models package.

Provides the declarative base, mixins and enums for all database models.
"""

from campusqa.models.base.base_model import Base, BaseModel
from campusqa.models.base.mixins import CreatedAtMixin, TimestampMixin, utcnow
from campusqa.models.base.enums import (
    FlagType,
    MessageType,
    ReviewerRequestStatus,
    TargetType,
    RoleName,
)

__all__ = [
    "Base",
    "BaseModel",
    "CreatedAtMixin",
    "TimestampMixin",
    "utcnow",
    "FlagType",
    "MessageType",
    "ReviewerRequestStatus",
    "TargetType",
    "RoleName",
]
