"""
Trusted reviewer registry model.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, String, false
from sqlalchemy.orm import validates

from campusqa.core.constants import (
    DEFAULT_TRUST_WEIGHT,
    MAX_TRUST_WEIGHT,
    MIN_TRUST_WEIGHT,
)
from campusqa.models.base import Base, TimestampMixin

__all__ = ["TrustedReviewer"]


class TrustedReviewer(Base, TimestampMixin):
    """
    A student's trust in one reviewer.

    The pair (student_username, reviewer_username) is the primary key,
    so a student can trust a given reviewer at most once.
    """

    __tablename__ = "trusted_reviewers"

    student_username = Column(String(255), primary_key=True)
    reviewer_username = Column(String(255), primary_key=True)

    weight = Column(
        Integer,
        nullable=False,
        default=DEFAULT_TRUST_WEIGHT,
        server_default=str(DEFAULT_TRUST_WEIGHT),
    )

    # Set when the reviewer posts a new review version, cleared when
    # the student views the reviewer's profile
    has_unseen_update = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    __table_args__ = (
        CheckConstraint(
            f"weight >= {MIN_TRUST_WEIGHT} AND weight <= {MAX_TRUST_WEIGHT}",
            name="check_trust_weight_range",
        ),
        Index("idx_trusted_reviewer_reviewer", "reviewer_username"),
    )

    @validates("weight")
    def validate_weight(self, key, value):
        if value is None or not MIN_TRUST_WEIGHT <= int(value) <= MAX_TRUST_WEIGHT:
            raise ValueError(
                f"Trust weight must be between {MIN_TRUST_WEIGHT} and {MAX_TRUST_WEIGHT}"
            )
        return int(value)

    def __repr__(self):
        return (
            f"<TrustedReviewer(student={self.student_username}, "
            f"reviewer={self.reviewer_username}, weight={self.weight})>"
        )
