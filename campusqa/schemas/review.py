"""
Review and trust schemas.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from campusqa.core.constants import (
    DEFAULT_TRUST_WEIGHT,
    MAX_RATING,
    MAX_TRUST_WEIGHT,
    MIN_RATING,
    MIN_TRUST_WEIGHT,
)
from campusqa.models.base import TargetType
from campusqa.schemas.base import BaseSchema

__all__ = [
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewHistoryResponse",
    "ReviewerScorecard",
    "DeleteHistoryResponse",
    "TrustUpdate",
    "TrustEntryResponse",
    "TrustedReviewersResponse",
    "UpdatedReviewersResponse",
]


class ReviewCreate(BaseSchema):
    reviewer_username: str = Field(..., min_length=1, max_length=255)
    target_type: TargetType
    target_id: int
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: Optional[str] = Field(default=None)


class ReviewUpdate(BaseSchema):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: Optional[str] = Field(default=None)


class ReviewResponse(BaseSchema):
    """One review version."""

    id: int
    reviewer_username: str
    target_type: TargetType
    target_id: int
    rating: int
    comment: Optional[str] = None
    timestamp: datetime = Field(..., description="When this version was written")
    previous_review_id: Optional[int] = None
    is_latest: bool


class ReviewHistoryResponse(BaseSchema):
    reviewer_username: str
    target_id: int
    versions: List[ReviewResponse] = Field(default_factory=list, description="Oldest first")


class ReviewerScorecard(BaseSchema):
    reviewer: str
    review_count: int = Field(..., ge=0)
    average_rating: Optional[float] = None
    feedback_count: int = Field(..., ge=0)


class DeleteHistoryResponse(BaseSchema):
    deleted: bool
    deleted_ids: List[int] = Field(default_factory=list)


class TrustUpdate(BaseSchema):
    weight: int = Field(default=DEFAULT_TRUST_WEIGHT, ge=MIN_TRUST_WEIGHT, le=MAX_TRUST_WEIGHT)


class TrustEntryResponse(BaseSchema):
    student_username: str
    reviewer_username: str
    weight: int
    has_unseen_update: bool


class TrustedReviewersResponse(BaseSchema):
    student_username: str
    trusted: Dict[str, int] = Field(default_factory=dict, description="Reviewer to weight")


class UpdatedReviewersResponse(BaseSchema):
    student_username: str
    reviewers: List[str] = Field(default_factory=list)
