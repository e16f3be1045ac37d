"""Tests for questions, answers and messages."""

import pytest

from campusqa.models.content import join_tags, split_tags
from campusqa.services.base.service_result import ErrorCode


@pytest.fixture
def content(services, users):
    return services.content()


@pytest.fixture
def question(content):
    return content.create_question(
        "maan", "How do I pass an array to a function?", "Details inside", ["C", "arrays"]
    ).data


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


class TestQuestions:
    def test_create_and_get(self, content, question):
        fetched = content.get_question(question.id).data

        assert fetched.title == "How do I pass an array to a function?"
        assert fetched.tag_list == ["c", "arrays"]
        assert fetched.accepted_answer_id is None

    def test_title_required(self, content):
        result = content.create_question("maan", "  ", "body")
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "title"

    def test_get_missing(self, content):
        assert content.get_question(404).error_code == ErrorCode.NOT_FOUND

    def test_search(self, content, question):
        content.create_question("riya", "Pointers", "What is a null pointer?", ["c"])

        assert len(content.list_questions().data) == 2
        assert [q.author for q in content.list_questions(author="riya").data] == ["riya"]
        assert len(content.list_questions(tag="C").data) == 2
        assert [q.id for q in content.list_questions(tag="arrays").data] == [question.id]
        assert len(content.list_questions(text="null").data) == 1

    def test_update_only_given_fields(self, content, question):
        updated = content.update_question(question.id, content="More details", tags=[]).data

        assert updated.title == question.title
        assert updated.content == "More details"
        assert updated.tag_list == []

    def test_tag_helpers(self):
        assert join_tags([" Python", "sql", "python", ""]) == "python,sql"
        assert split_tags("python, sql,,") == ["python", "sql"]
        assert split_tags(None) == []


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------


class TestAnswers:
    def test_answer_and_reply(self, content, question):
        answer = content.create_answer(question.id, "alex", "Use a pointer").data
        reply = content.create_answer(question.id, "maan", "Thanks", parent_answer_id=answer.id).data

        assert reply.is_reply
        assert [a.id for a in content.list_answers(question.id).data] == [answer.id, reply.id]

    def test_answer_to_missing_question(self, content):
        assert content.create_answer(999, "alex", "text").error_code == ErrorCode.NOT_FOUND

    def test_reply_must_share_question(self, content, question):
        other = content.create_question("riya", "Other", "body").data
        answer = content.create_answer(other.id, "alex", "Answer").data

        result = content.create_answer(question.id, "maan", "Reply", parent_answer_id=answer.id)
        assert result.error.field == "parent_answer_id"

    def test_accept_answer(self, content, question):
        answer = content.create_answer(question.id, "alex", "Use a pointer").data

        assert content.accept_answer(question.id, answer.id, acting_user="riya").error_code == (
            ErrorCode.INSUFFICIENT_PERMISSIONS
        )
        assert content.accept_answer(question.id, answer.id, acting_user="maan").data.accepted_answer_id == answer.id

    def test_accept_answer_from_other_question(self, content, question):
        other = content.create_question("riya", "Other", "body").data
        answer = content.create_answer(other.id, "alex", "Answer").data

        assert content.accept_answer(question.id, answer.id).error_code == ErrorCode.VALIDATION_ERROR

    def test_delete_answer_removes_reviews_and_acceptance(self, content, question, review_service):
        answer = content.create_answer(question.id, "alex", "Use a pointer").data
        content.accept_answer(question.id, answer.id)
        review_service.submit_review("sam", "answer", answer.id, 4, None)

        assert content.delete_answer(answer.id).data is True

        assert review_service.get_latest_for_target("answer", answer.id).data == []
        assert content.get_question(question.id).data.accepted_answer_id is None
        assert content.delete_answer(answer.id).data is False


# ---------------------------------------------------------------------------
# Deleting a question
# ---------------------------------------------------------------------------


class TestDeleteQuestion:
    def test_cascades_to_answers_and_reviews(self, content, question, review_service):
        answer = content.create_answer(question.id, "alex", "Use a pointer").data
        first = review_service.submit_review("alex", "answer", answer.id, 2, "meh").data
        review_service.update_review(first.id, 4, "better")
        review_service.submit_review("sam", "question", question.id, 5, None)
        unrelated = review_service.submit_review("sam", "answer", answer.id + 100, 3, None).data

        result = content.delete_question(question.id)

        assert result.data is True
        assert result.metadata == {"deleted_answers": 1, "deleted_reviews": 3}
        assert content.get_question(question.id).error_code == ErrorCode.NOT_FOUND
        assert content.get_answer(answer.id).error_code == ErrorCode.NOT_FOUND
        assert review_service.get_history_for("alex", answer.id).data == []
        assert review_service.get_review(unrelated.id).is_success

    def test_missing_question(self, content):
        assert content.delete_question(999).data is False


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class TestMessages:
    def test_send_and_read(self, content):
        message = content.send_message("maan", "alex", "Hi there").data

        assert message.message_type == "private"
        assert content.unread_count("alex").data == 1
        assert content.mark_read(message.id).data.is_read is True
        assert content.unread_count("alex").data == 0
        assert [m.id for m in content.inbox("alex").data] == [message.id]
        assert content.inbox("alex", unread_only=True).data == []

    def test_unknown_message_type(self, content):
        result = content.send_message("maan", "alex", "Hi", message_type="shout")
        assert result.error.field == "message_type"

    def test_mark_read_missing(self, content):
        assert content.mark_read(31337).error_code == ErrorCode.NOT_FOUND

    def test_review_feedback(self, content):
        content.send_review_feedback("maan", "alex", 2002, "Fair review")
        content.send_review_feedback("riya", "alex", 3003, "Too harsh")
        content.send_message("riya", "alex", "Unrelated")

        assert [m.content for m in content.feedback_for_reviewer("alex").data] == ["Fair review", "Too harsh"]
        assert [m.sender for m in content.feedback_for_reviewer("alex", answer_id=3003).data] == ["riya"]
