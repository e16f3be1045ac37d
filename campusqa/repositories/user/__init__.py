"""
User repositories.
"""

from campusqa.repositories.user.user_repository import ReviewerRequestRepository, UserRepository

__all__ = [
    "ReviewerRequestRepository",
    "UserRepository",
]
