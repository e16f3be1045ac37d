"""
Message model for inbox and review feedback.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, String, Text, false
from sqlalchemy.orm import validates

from campusqa.models.base import BaseModel, CreatedAtMixin, MessageType

__all__ = ["Message"]


class Message(BaseModel, CreatedAtMixin):
    """
    A message between two users, optionally attached to a question or answer.
    """

    __tablename__ = "messages"

    sender = Column(String(255), nullable=False)
    recipient = Column(String(255), nullable=False)

    question_id = Column(Integer, nullable=True, index=True)
    answer_id = Column(Integer, nullable=True, index=True)

    content = Column(Text, nullable=False)
    message_type = Column(
        String(32),
        nullable=False,
        default=MessageType.PRIVATE.value,
    )
    is_read = Column(Boolean, nullable=False, default=False, server_default=false())

    __table_args__ = (
        CheckConstraint(
            "message_type IN ('question', 'answer', 'review-feedback', 'private')",
            name="check_message_type",
        ),
        Index("idx_message_recipient_read", "recipient", "is_read"),
    )

    @validates("message_type")
    def validate_message_type(self, key, value):
        return MessageType(value).value

    def __repr__(self):
        return (
            f"<Message(id={self.id}, from={self.sender}, to={self.recipient}, "
            f"type={self.message_type})>"
        )
