"""
Database models.

Importing this package registers every table on ``Base.metadata``.
"""

from campusqa.models.base import Base, BaseModel
from campusqa.models.content import Answer, Message, Question
from campusqa.models.moderation import Flag
from campusqa.models.review import Review, TrustedReviewer
from campusqa.models.user import ReviewerRequest, User, UserRole

__all__ = [
    "Base",
    "BaseModel",
    "Answer",
    "Message",
    "Question",
    "Flag",
    "Review",
    "TrustedReviewer",
    "ReviewerRequest",
    "User",
    "UserRole",
]
