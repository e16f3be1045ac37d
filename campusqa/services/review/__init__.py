"""
Review services: the version chain and the trusted reviewer registry.
"""

from campusqa.services.review.review_service import ReviewService, WeightedReview
from campusqa.services.review.trust_service import TrustService

__all__ = [
    "ReviewService",
    "TrustService",
    "WeightedReview",
]
