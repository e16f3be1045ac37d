"""
Moderation flag ledger model.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, String, Text, false
from sqlalchemy.orm import validates

from campusqa.models.base import BaseModel, CreatedAtMixin, FlagType, utcnow

__all__ = ["Flag"]


class Flag(BaseModel, CreatedAtMixin):
    """
    Moderation report filed by staff against a question, answer or message.

    Flags are append-only: the only mutation is the one-way transition
    from unresolved to resolved.
    """

    __tablename__ = "flags"

    flag_type = Column(String(16), nullable=False)
    item_id = Column(String(64), nullable=False)

    flagged_by = Column(String(255), nullable=False, index=True)
    reason = Column(Text, nullable=False)

    # Status
    is_resolved = Column(Boolean, default=False, server_default=false(), nullable=False, index=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    resolved_by = Column(String(255), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "flag_type IN ('QUESTION', 'ANSWER', 'MESSAGE')",
            name="check_flag_type",
        ),
        Index("idx_flag_item_status", "flag_type", "item_id", "is_resolved"),
    )

    @validates("flag_type")
    def validate_flag_type(self, key, value):
        return FlagType(value).value

    @validates("item_id")
    def validate_item_id(self, key, value):
        """Item ids are stored as strings whatever the source type."""
        return str(value)

    def resolve(self, resolved_by: Optional[str] = None, when: Optional[datetime] = None):
        """Mark the flag resolved. Resolving twice keeps the first resolution."""
        if self.is_resolved:
            return
        self.is_resolved = True
        self.resolved_by = resolved_by
        self.resolved_at = when or utcnow()

    def __repr__(self):
        return (
            f"<Flag(id={self.id}, type={self.flag_type}, item={self.item_id}, "
            f"resolved={self.is_resolved})>"
        )
