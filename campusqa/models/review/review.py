"""
Review model.

A review is never edited in place. Each edit inserts a new row whose
previous_review_id points at the version it replaces, and exactly one
row per (reviewer, target) pair carries is_latest.
"""

from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import synonym, validates

from campusqa.core.constants import MAX_RATING, MIN_RATING
from campusqa.models.base import BaseModel, CreatedAtMixin, TargetType

__all__ = ["Review"]


class Review(BaseModel, CreatedAtMixin):
    """
    One version of a reviewer's review of a question or answer.
    """

    __tablename__ = "reviews"

    reviewer_username = Column(String(255), nullable=False, index=True)

    # Polymorphic target, no foreign key
    target_type = Column(String(16), nullable=False)
    target_id = Column(Integer, nullable=False)

    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    # Version chain
    previous_review_id = Column(
        Integer,
        ForeignKey("reviews.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_latest = Column(Boolean, nullable=False, default=True)

    timestamp = synonym("created_at")

    __table_args__ = (
        CheckConstraint(
            f"rating >= {MIN_RATING} AND rating <= {MAX_RATING}",
            name="check_review_rating_range",
        ),
        CheckConstraint(
            "target_type IN ('question', 'answer')",
            name="check_review_target_type",
        ),
        # At most one latest version per (reviewer, target)
        Index(
            "uq_review_single_latest",
            "reviewer_username",
            "target_type",
            "target_id",
            unique=True,
            sqlite_where=text("is_latest"),
            postgresql_where=text("is_latest"),
        ),
        Index("idx_review_target", "target_type", "target_id", "is_latest"),
    )

    @validates("target_type")
    def validate_target_type(self, key, value):
        """Store the plain string value of the target type."""
        return TargetType(value).value

    @validates("rating")
    def validate_rating(self, key, value):
        if value is None or not MIN_RATING <= int(value) <= MAX_RATING:
            raise ValueError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}"
            )
        return int(value)

    @property
    def is_revision(self) -> bool:
        """True when this row supersedes an earlier version."""
        return self.previous_review_id is not None

    def same_content(self, rating: int, comment: Optional[str]) -> bool:
        """Whether rating and comment match this version exactly."""
        return self.rating == rating and (self.comment or None) == (comment or None)

    def __repr__(self):
        return (
            f"<Review(id={self.id}, reviewer={self.reviewer_username}, "
            f"target={self.target_type}:{self.target_id}, "
            f"rating={self.rating}, latest={self.is_latest})>"
        )
