"""
Business services.

Every public operation returns a ServiceResult instead of raising.
"""

from campusqa.services.base import ServiceFactory, ServiceResult
from campusqa.services.content import ContentService
from campusqa.services.moderation import FlagService
from campusqa.services.review import ReviewService, TrustService, WeightedReview
from campusqa.services.user import UserService

__all__ = [
    "ServiceFactory",
    "ServiceResult",
    "ContentService",
    "FlagService",
    "ReviewService",
    "TrustService",
    "WeightedReview",
    "UserService",
]
