"""
Pydantic request and response schemas for the HTTP API.
"""

from campusqa.schemas.base import BaseSchema, ErrorDetail, ErrorResponse
from campusqa.schemas.flag import (
    FlagCreate,
    FlagResolve,
    FlagResolveResponse,
    FlagResponse,
    UnresolvedCountResponse,
)
from campusqa.schemas.review import (
    DeleteHistoryResponse,
    ReviewCreate,
    ReviewerScorecard,
    ReviewHistoryResponse,
    ReviewResponse,
    ReviewUpdate,
    TrustedReviewersResponse,
    TrustEntryResponse,
    TrustUpdate,
    UpdatedReviewersResponse,
)

__all__ = [
    "BaseSchema",
    "ErrorDetail",
    "ErrorResponse",
    "FlagCreate",
    "FlagResolve",
    "FlagResolveResponse",
    "FlagResponse",
    "UnresolvedCountResponse",
    "DeleteHistoryResponse",
    "ReviewCreate",
    "ReviewerScorecard",
    "ReviewHistoryResponse",
    "ReviewResponse",
    "ReviewUpdate",
    "TrustedReviewersResponse",
    "TrustEntryResponse",
    "TrustUpdate",
    "UpdatedReviewersResponse",
]
