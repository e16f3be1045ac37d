"""
Content models package: questions, answers and messages.
"""

from campusqa.models.content.answer import Answer
from campusqa.models.content.message import Message
from campusqa.models.content.question import Question, join_tags, split_tags

__all__ = [
    "Answer",
    "Message",
    "Question",
    "join_tags",
    "split_tags",
]
