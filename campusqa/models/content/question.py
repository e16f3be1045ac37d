"""
Question model.
"""

from typing import Iterable, List, Optional

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import validates

from campusqa.models.base import BaseModel, CreatedAtMixin

__all__ = ["Question", "join_tags", "split_tags"]


def split_tags(raw: Optional[str]) -> List[str]:
    """Parse the stored comma-separated tag string."""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def join_tags(tags: Optional[Iterable[str]]) -> str:
    """Normalize tags to a lower-case, de-duplicated comma-separated string."""
    seen = []
    for tag in tags or []:
        tag = tag.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return ",".join(seen)


class Question(BaseModel, CreatedAtMixin):
    """
    A question posted by a student.
    """

    __tablename__ = "questions"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String(255), nullable=False, index=True)

    # Comma-separated list
    tags = Column(Text, nullable=False, default="")

    # Not a foreign key: answers reference questions, so the reverse
    # link is checked by the service when an answer is accepted
    accepted_answer_id = Column(Integer, nullable=True)

    @validates("title")
    def validate_title(self, key, value):
        if not value or not value.strip():
            raise ValueError("Question title cannot be empty")
        return value.strip()

    @property
    def tag_list(self) -> List[str]:
        return split_tags(self.tags)

    def has_tag(self, tag: str) -> bool:
        return tag.strip().lower() in {t.lower() for t in self.tag_list}

    def __repr__(self):
        return f"<Question(id={self.id}, author={self.author}, title={self.title!r})>"
