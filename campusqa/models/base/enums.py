"""
Enumerations shared by models, schemas and services.
"""

from enum import Enum


class TargetType(str, Enum):
    """Kinds of content a review can target"""
    QUESTION = "question"
    ANSWER = "answer"


class FlagType(str, Enum):
    """Kinds of content a moderation flag can target"""
    QUESTION = "QUESTION"
    ANSWER = "ANSWER"
    MESSAGE = "MESSAGE"


class RoleName(str, Enum):
    """Roles a user can hold"""
    ADMIN = "admin"
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    STAFF = "staff"
    REVIEWER = "reviewer"


class ReviewerRequestStatus(str, Enum):
    """Lifecycle of a request for the reviewer role"""
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class MessageType(str, Enum):
    """Message categories"""
    QUESTION = "question"
    ANSWER = "answer"
    REVIEW_FEEDBACK = "review-feedback"
    PRIVATE = "private"
