"""Tests for the user directory and the reviewer-role workflow."""

from campusqa.services.base.service_result import ErrorCode


# ---------------------------------------------------------------------------
# Users and roles
# ---------------------------------------------------------------------------


class TestRoles:
    def test_register_defaults_to_student(self, users):
        result = users.register_user("newbie")

        assert result.is_success
        assert users.get_roles("newbie").data == {"student"}

    def test_register_duplicate_conflicts(self, users):
        assert users.register_user("alex").error_code == ErrorCode.CONFLICT

    def test_register_unknown_role(self, users):
        result = users.register_user("x", ["wizard"])
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "role"

    def test_roles_are_normalized(self, users):
        users.register_user("dana", ["Staff", " ADMIN "])
        assert users.get_roles("dana").data == {"staff", "admin"}

    def test_get_roles_for_unknown_user(self, users):
        assert users.get_roles("ghost").error_code == ErrorCode.NOT_FOUND

    def test_has_role(self, users):
        assert users.has_role("alex", "reviewer").data is True
        assert users.has_role("maan", "reviewer").data is False
        assert users.has_role("ghost", "student").data is False

    def test_add_and_remove_role(self, users):
        assert users.add_role("maan", "reviewer").data is True
        assert users.add_role("maan", "reviewer").data is False
        assert users.get_roles("maan").data == {"student", "reviewer"}

        assert users.remove_role("maan", "reviewer").data is True
        assert users.remove_role("maan", "reviewer").data is False
        assert users.get_roles("maan").data == {"student"}

    def test_add_role_to_unknown_user(self, users):
        assert users.add_role("ghost", "staff").error_code == ErrorCode.NOT_FOUND

    def test_granted_role_unlocks_reviews(self, users, review_service):
        assert review_service.submit_review("maan", "answer", 1, 4, None).error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

        users.add_role("maan", "reviewer")

        assert review_service.submit_review("maan", "answer", 1, 4, None).is_success


# ---------------------------------------------------------------------------
# Reviewer-role requests
# ---------------------------------------------------------------------------


class TestReviewerRequests:
    def test_request_then_approve(self, users):
        request = users.request_reviewer_role("maan").data

        assert request.is_pending
        assert users.get_request_status("maan").data == "pending"
        assert [r.username for r in users.list_pending_requests().data] == ["maan"]

        result = users.approve_request("maan", "ivan")

        assert result.is_success
        assert result.data.status == "approved"
        assert result.data.decided_by == "ivan"
        assert result.data.decided_at is not None
        assert users.has_role("maan", "reviewer").data is True
        assert users.list_pending_requests().data == []

    def test_deny_keeps_roles(self, users):
        users.request_reviewer_role("maan")

        result = users.deny_request("maan", "ivan")

        assert result.data.status == "denied"
        assert users.get_roles("maan").data == {"student"}

    def test_duplicate_pending_request_conflicts(self, users):
        users.request_reviewer_role("maan")
        assert users.request_reviewer_role("maan").error_code == ErrorCode.CONFLICT

    def test_existing_reviewer_cannot_request(self, users):
        assert users.request_reviewer_role("alex").error_code == ErrorCode.CONFLICT

    def test_denied_request_can_be_reopened(self, users):
        users.request_reviewer_role("maan")
        users.deny_request("maan", "ivan")

        reopened = users.request_reviewer_role("maan")

        assert reopened.is_success
        assert reopened.data.status == "pending"
        assert reopened.data.decided_by is None

    def test_only_instructors_and_admins_decide(self, users):
        users.request_reviewer_role("maan")

        assert users.approve_request("maan", "stella").error_code == ErrorCode.INSUFFICIENT_PERMISSIONS
        assert users.get_request_status("maan").data == "pending"

    def test_deciding_twice_conflicts(self, users):
        users.request_reviewer_role("maan")
        users.approve_request("maan", "ivan")

        assert users.deny_request("maan", "ivan").error_code == ErrorCode.CONFLICT

    def test_decide_without_request(self, users):
        assert users.approve_request("riya", "ivan").error_code == ErrorCode.NOT_FOUND
        assert users.get_request_status("riya").data is None

    def test_request_for_unknown_user(self, users):
        assert users.request_reviewer_role("ghost").error_code == ErrorCode.NOT_FOUND
