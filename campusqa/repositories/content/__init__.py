"""
Content repositories.
"""

from campusqa.repositories.content.content_repository import (
    AnswerRepository,
    MessageRepository,
    QuestionRepository,
)

__all__ = [
    "AnswerRepository",
    "MessageRepository",
    "QuestionRepository",
]
