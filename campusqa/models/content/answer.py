"""
Answer model.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from campusqa.models.base import BaseModel, CreatedAtMixin

__all__ = ["Answer"]


class Answer(BaseModel, CreatedAtMixin):
    """
    An answer to a question, optionally threaded under another answer.
    """

    __tablename__ = "answers"

    question_id = Column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    author = Column(String(255), nullable=False, index=True)

    parent_answer_id = Column(
        Integer,
        ForeignKey("answers.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def is_reply(self) -> bool:
        return self.parent_answer_id is not None

    def __repr__(self):
        return f"<Answer(id={self.id}, question_id={self.question_id}, author={self.author})>"
