"""
User models package.
"""

from campusqa.models.user.user import ReviewerRequest, User, UserRole

__all__ = [
    "User",
    "UserRole",
    "ReviewerRequest",
]
