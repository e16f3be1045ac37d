"""
Content service: questions, answers and messages.

Plain CRUD with the few cross-entity rules the review and flag ledgers
rely on: deleting a question removes its answers and every review of the
question or its answers, and an accepted answer must belong to its
question.
"""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from campusqa.config.settings import Settings
from campusqa.core.constants import MAX_USERNAME_LENGTH
from campusqa.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from campusqa.models.base import MessageType, TargetType
from campusqa.models.content import Answer, Message, Question, join_tags
from campusqa.repositories.content import AnswerRepository, MessageRepository, QuestionRepository
from campusqa.repositories.review import ReviewRepository
from campusqa.services.base.base_service import BaseService
from campusqa.services.base.service_result import ServiceResult


class ContentService(BaseService):

    def __init__(self, db_session: Session, config: Optional[Settings] = None):
        super().__init__(db_session, config)
        self.questions = QuestionRepository(db_session)
        self.answers = AnswerRepository(db_session)
        self.messages = MessageRepository(db_session)
        self.reviews = ReviewRepository(db_session)

    # -------------------------------------------------------------------------
    # Questions
    # -------------------------------------------------------------------------

    def create_question(
        self,
        author: str,
        title: str,
        content: str,
        tags: Optional[Iterable[str]] = None,
    ) -> ServiceResult[Question]:
        try:
            author = self._require_text(author, "author", MAX_USERNAME_LENGTH)
            title = self._require_text(title, "title", 255)
            content = self._require_text(content, "content")
            with self.transaction():
                question = self.questions.create(Question(
                    author=author,
                    title=title,
                    content=content,
                    tags=join_tags(tags),
                ))
            self._logger.info(f"Question {question.id} posted by {author}")
            return ServiceResult.success(question, message="Question created")
        except Exception as e:
            return self._handle_exception(e, "create question", author)

    def get_question(self, question_id: int) -> ServiceResult[Question]:
        try:
            with self.read_scope():
                question = self.questions.get_by_id(question_id, refresh=True)
            return ServiceResult.success(question)
        except Exception as e:
            return self._handle_exception(e, "get question", question_id)

    def list_questions(
        self,
        author: Optional[str] = None,
        tag: Optional[str] = None,
        text: Optional[str] = None,
    ) -> ServiceResult[List[Question]]:
        try:
            with self.read_scope():
                questions = self.questions.search(author=author, tag=tag, text=text)
            return ServiceResult.success(questions)
        except Exception as e:
            return self._handle_exception(e, "list questions")

    def update_question(
        self,
        question_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> ServiceResult[Question]:
        """Edit a question in place. Fields left as None are unchanged."""
        try:
            with self.transaction():
                question = self.questions.get_by_id(question_id, refresh=True)
                if title is not None:
                    question.title = self._require_text(title, "title", 255)
                if content is not None:
                    question.content = self._require_text(content, "content")
                if tags is not None:
                    question.tags = join_tags(tags)
                self.db.flush()
            return ServiceResult.success(question, message="Question updated")
        except Exception as e:
            return self._handle_exception(e, "update question", question_id)

    def accept_answer(
        self,
        question_id: int,
        answer_id: int,
        acting_user: Optional[str] = None,
    ) -> ServiceResult[Question]:
        """
        Mark an answer as the accepted one.

        When acting_user is given it must be the question's author.
        """
        try:
            with self.transaction():
                question = self.questions.get_by_id(question_id, refresh=True)
                if acting_user is not None and acting_user != question.author:
                    raise AuthorizationError(
                        "Only the question author can accept an answer",
                        username=acting_user,
                    )
                answer = self.answers.get_by_id(answer_id, refresh=True)
                if answer.question_id != question.id:
                    raise ValidationError(
                        f"Answer {answer_id} does not belong to question {question_id}",
                        field="answer_id",
                    )
                question.accepted_answer_id = answer.id
                self.db.flush()
            return ServiceResult.success(question, message="Answer accepted")
        except Exception as e:
            return self._handle_exception(e, "accept answer", f"{question_id}:{answer_id}")

    def delete_question(self, question_id: int) -> ServiceResult[bool]:
        """Delete a question, its answers and all reviews targeting either."""
        try:
            with self.transaction():
                question = self.questions.find_by_id(question_id)
                if question is None:
                    return ServiceResult.success(False, message="Question not found")
                answer_ids = self.answers.ids_for_question(question_id)
                removed_reviews = self.reviews.delete_for_targets(TargetType.ANSWER.value, answer_ids)
                removed_reviews += self.reviews.delete_for_targets(TargetType.QUESTION.value, [question_id])
                self.answers.delete_many(answer_ids)
                self.questions.delete(question)

            self._logger.info(
                f"Deleted question {question_id} with {len(answer_ids)} answers and {removed_reviews} reviews"
            )
            return ServiceResult.success(
                True,
                metadata={"deleted_answers": len(answer_ids), "deleted_reviews": removed_reviews},
            )
        except Exception as e:
            return self._handle_exception(e, "delete question", question_id)

    # -------------------------------------------------------------------------
    # Answers
    # -------------------------------------------------------------------------

    def create_answer(
        self,
        question_id: int,
        author: str,
        content: str,
        parent_answer_id: Optional[int] = None,
    ) -> ServiceResult[Answer]:
        try:
            author = self._require_text(author, "author", MAX_USERNAME_LENGTH)
            content = self._require_text(content, "content")
            with self.transaction():
                self.questions.get_by_id(question_id)
                if parent_answer_id is not None:
                    parent = self.answers.get_by_id(parent_answer_id)
                    if parent.question_id != question_id:
                        raise ValidationError(
                            "A reply must belong to the same question as its parent",
                            field="parent_answer_id",
                        )
                answer = self.answers.create(Answer(
                    question_id=question_id,
                    author=author,
                    content=content,
                    parent_answer_id=parent_answer_id,
                ))
            return ServiceResult.success(answer, message="Answer created")
        except Exception as e:
            return self._handle_exception(e, "create answer", question_id)

    def get_answer(self, answer_id: int) -> ServiceResult[Answer]:
        try:
            with self.read_scope():
                answer = self.answers.get_by_id(answer_id, refresh=True)
            return ServiceResult.success(answer)
        except Exception as e:
            return self._handle_exception(e, "get answer", answer_id)

    def list_answers(self, question_id: int) -> ServiceResult[List[Answer]]:
        try:
            with self.read_scope():
                answers = self.answers.list_for_question(question_id)
            return ServiceResult.success(answers)
        except Exception as e:
            return self._handle_exception(e, "list answers", question_id)

    def delete_answer(self, answer_id: int) -> ServiceResult[bool]:
        """Delete one answer and its reviews; replies to it are kept."""
        try:
            with self.transaction():
                if self.answers.find_by_id(answer_id) is None:
                    return ServiceResult.success(False, message="Answer not found")
                self.reviews.delete_for_targets(TargetType.ANSWER.value, [answer_id])
                self.questions.clear_accepted_answer([answer_id])
                self.answers.delete_many([answer_id])
            return ServiceResult.success(True)
        except Exception as e:
            return self._handle_exception(e, "delete answer", answer_id)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def send_message(
        self,
        sender: str,
        recipient: str,
        content: str,
        message_type: str = MessageType.PRIVATE.value,
        question_id: Optional[int] = None,
        answer_id: Optional[int] = None,
    ) -> ServiceResult[Message]:
        try:
            sender = self._require_text(sender, "sender", MAX_USERNAME_LENGTH)
            recipient = self._require_text(recipient, "recipient", MAX_USERNAME_LENGTH)
            content = self._require_text(content, "content")
            try:
                message_type = MessageType(message_type).value
            except ValueError:
                raise ValidationError(f"Unknown message type: {message_type}", field="message_type")

            with self.transaction():
                message = self.messages.create(Message(
                    sender=sender,
                    recipient=recipient,
                    content=content,
                    message_type=message_type,
                    question_id=question_id,
                    answer_id=answer_id,
                    is_read=False,
                ))
            return ServiceResult.success(message, message="Message sent")
        except Exception as e:
            return self._handle_exception(e, "send message", f"{sender}->{recipient}")

    def send_review_feedback(
        self,
        sender: str,
        reviewer: str,
        answer_id: int,
        content: str,
    ) -> ServiceResult[Message]:
        """Send a reviewer feedback about one of their reviews of an answer."""
        return self.send_message(
            sender,
            reviewer,
            content,
            message_type=MessageType.REVIEW_FEEDBACK.value,
            answer_id=answer_id,
        )

    def feedback_for_reviewer(self, reviewer: str, answer_id: Optional[int] = None) -> ServiceResult[List[Message]]:
        try:
            with self.read_scope():
                feedback = self.messages.feedback_for(reviewer, answer_id)
            return ServiceResult.success(feedback)
        except Exception as e:
            return self._handle_exception(e, "list review feedback", reviewer)

    def inbox(self, recipient: str, unread_only: bool = False) -> ServiceResult[List[Message]]:
        try:
            with self.read_scope():
                messages = self.messages.inbox(recipient, unread_only)
            return ServiceResult.success(messages)
        except Exception as e:
            return self._handle_exception(e, "list inbox", recipient)

    def mark_read(self, message_id: int) -> ServiceResult[Message]:
        try:
            with self.transaction():
                message = self.messages.find_by_id(message_id)
                if message is None:
                    raise NotFoundError("Message", message_id)
                message.is_read = True
                self.db.flush()
            return ServiceResult.success(message)
        except Exception as e:
            return self._handle_exception(e, "mark message read", message_id)

    def unread_count(self, recipient: str) -> ServiceResult[int]:
        try:
            with self.read_scope():
                count = self.messages.unread_count(recipient)
            return ServiceResult.success(count)
        except Exception as e:
            return self._handle_exception(e, "count unread messages", recipient)
