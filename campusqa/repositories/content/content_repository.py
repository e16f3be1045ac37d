"""
Question, answer and message repositories.
"""

from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusqa.models.content import Answer, Message, Question
from campusqa.repositories.base.base_repository import BaseRepository


class QuestionRepository(BaseRepository[Question]):

    def __init__(self, db: Session):
        super().__init__(Question, db)

    def search(
        self,
        author: Optional[str] = None,
        tag: Optional[str] = None,
        text: Optional[str] = None,
    ) -> List[Question]:
        """
        List questions newest first, optionally filtered.

        Tag matching is exact and case-insensitive against the stored
        comma-separated list.
        """
        stmt = (
            select(Question)
            .order_by(Question.created_at.desc(), Question.id.desc())
            .execution_options(populate_existing=True)
        )
        if author:
            stmt = stmt.where(Question.author == author)
        if text:
            pattern = f"%{text}%"
            stmt = stmt.where(Question.title.ilike(pattern) | Question.content.ilike(pattern))
        try:
            questions = list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise self._wrap(e, "search") from e
        if tag:
            questions = [q for q in questions if q.has_tag(tag)]
        return questions

    def clear_accepted_answer(self, answer_ids: List[int]) -> int:
        if not answer_ids:
            return 0
        try:
            result = self.db.execute(
                update(Question)
                .where(Question.accepted_answer_id.in_(answer_ids))
                .values(accepted_answer_id=None)
            )
        except SQLAlchemyError as e:
            raise self._wrap(e, "clear_accepted_answer") from e
        return result.rowcount


class AnswerRepository(BaseRepository[Answer]):

    def __init__(self, db: Session):
        super().__init__(Answer, db)

    def list_for_question(self, question_id: int) -> List[Answer]:
        return self.find_by_criteria({"question_id": question_id}, order_by=["created_at", "id"], refresh=True)

    def ids_for_question(self, question_id: int) -> List[int]:
        try:
            return list(self.db.scalars(
                select(Answer.id).where(Answer.question_id == question_id)
            ).all())
        except SQLAlchemyError as e:
            raise self._wrap(e, "ids_for_question") from e

    def delete_many(self, answer_ids: List[int]) -> int:
        """Delete answers by id, detaching any replies threaded under them."""
        if not answer_ids:
            return 0
        try:
            self.db.execute(
                update(Answer)
                .where(Answer.parent_answer_id.in_(answer_ids), Answer.id.not_in(answer_ids))
                .values(parent_answer_id=None)
            )
            result = self.db.execute(delete(Answer).where(Answer.id.in_(answer_ids)))
        except SQLAlchemyError as e:
            raise self._wrap(e, "delete_many") from e
        return result.rowcount


class MessageRepository(BaseRepository[Message]):

    def __init__(self, db: Session):
        super().__init__(Message, db)

    def inbox(self, recipient: str, unread_only: bool = False) -> List[Message]:
        criteria = {"recipient": recipient}
        if unread_only:
            criteria["is_read"] = False
        return self.find_by_criteria(criteria, order_by=["-created_at", "-id"], refresh=True)

    def unread_count(self, recipient: str) -> int:
        try:
            return int(self.db.scalar(
                select(func.count(Message.id)).where(
                    Message.recipient == recipient,
                    Message.is_read == False,  # noqa: E712
                )
            ) or 0)
        except SQLAlchemyError as e:
            raise self._wrap(e, "unread_count") from e

    def feedback_for(self, reviewer: str, answer_id: Optional[int] = None) -> List[Message]:
        criteria = {"recipient": reviewer, "message_type": "review-feedback"}
        if answer_id is not None:
            criteria["answer_id"] = answer_id
        return self.find_by_criteria(criteria, order_by=["created_at", "id"], refresh=True)

    def count_feedback_for(self, reviewer: str) -> int:
        return self.count({"recipient": reviewer, "message_type": "review-feedback"})
