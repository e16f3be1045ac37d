"""
Review repositories.
"""

from campusqa.repositories.review.review_repository import ReviewRepository, order_by_chain
from campusqa.repositories.review.trusted_reviewer_repository import TrustedReviewerRepository

__all__ = [
    "ReviewRepository",
    "TrustedReviewerRepository",
    "order_by_chain",
]
