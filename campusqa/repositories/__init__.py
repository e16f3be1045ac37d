"""
Data access layer.

One repository per aggregate; repositories flush but leave commits to
the services that own the transaction.
"""

from campusqa.repositories.base.base_repository import BaseRepository
from campusqa.repositories.content import AnswerRepository, MessageRepository, QuestionRepository
from campusqa.repositories.moderation import FlagRepository
from campusqa.repositories.review import ReviewRepository, TrustedReviewerRepository
from campusqa.repositories.user import ReviewerRequestRepository, UserRepository

__all__ = [
    "BaseRepository",
    "AnswerRepository",
    "MessageRepository",
    "QuestionRepository",
    "FlagRepository",
    "ReviewRepository",
    "TrustedReviewerRepository",
    "ReviewerRequestRepository",
    "UserRepository",
]
