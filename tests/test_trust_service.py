"""Tests for the trusted reviewer registry."""

import pytest

from campusqa.services.base.service_result import ErrorCode


# ---------------------------------------------------------------------------
# add_or_update_trust / remove_trust
# ---------------------------------------------------------------------------


class TestTrustEntries:
    def test_add_then_list(self, trust_service):
        result = trust_service.add_or_update_trust("maan", "alex", 3)

        assert result.is_success
        assert result.metadata["created"] is True
        assert result.data.has_unseen_update is False
        assert trust_service.list_trusted("maan").data == {"alex": 3}

    def test_default_weight_is_one(self, trust_service):
        trust_service.add_or_update_trust("maan", "sam")
        assert trust_service.list_trusted("maan").data == {"sam": 1}

    def test_update_changes_weight_without_duplicating(self, trust_service):
        trust_service.add_or_update_trust("maan", "alex", 3)
        result = trust_service.add_or_update_trust("maan", "alex", 5)

        assert result.metadata["created"] is False
        assert trust_service.list_trusted("maan").data == {"alex": 5}

    def test_repeating_same_weight_is_idempotent(self, trust_service):
        trust_service.add_or_update_trust("maan", "alex", 2)
        trust_service.add_or_update_trust("maan", "alex", 2)

        assert trust_service.list_trusted("maan").data == {"alex": 2}

    @pytest.mark.parametrize("weight", [0, 6, -3])
    def test_weight_out_of_range(self, trust_service, weight):
        result = trust_service.add_or_update_trust("maan", "alex", weight)

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "weight"
        assert trust_service.list_trusted("maan").data == {}

    def test_cannot_trust_self(self, trust_service):
        assert trust_service.add_or_update_trust("alex", "alex", 2).error_code == ErrorCode.VALIDATION_ERROR

    def test_blank_usernames_rejected(self, trust_service):
        assert trust_service.add_or_update_trust("", "alex").error_code == ErrorCode.VALIDATION_ERROR
        assert trust_service.add_or_update_trust("maan", None).error_code == ErrorCode.VALIDATION_ERROR

    def test_remove(self, trust_service):
        trust_service.add_or_update_trust("maan", "alex", 3)

        assert trust_service.remove_trust("maan", "alex").data is True
        assert trust_service.remove_trust("maan", "alex").data is False
        assert trust_service.list_trusted("maan").data == {}

    def test_lists_are_per_student(self, trust_service):
        trust_service.add_or_update_trust("maan", "alex", 3)
        trust_service.add_or_update_trust("riya", "sam", 4)

        assert trust_service.list_trusted("maan").data == {"alex": 3}
        assert trust_service.list_trusted("riya").data == {"sam": 4}


# ---------------------------------------------------------------------------
# Unseen-update flags
# ---------------------------------------------------------------------------


class TestUnseenUpdates:
    def test_mark_and_clear_one_pair(self, trust_service):
        trust_service.add_or_update_trust("maan", "alex", 3)

        assert trust_service.mark_updated("maan", "alex").is_success
        assert trust_service.has_unseen_update("maan", "alex").data is True
        assert trust_service.list_updated("maan").data == {"alex"}

        assert trust_service.clear_update_flag("maan", "alex").data is True
        assert trust_service.has_unseen_update("maan", "alex").data is False
        assert trust_service.list_updated("maan").data == set()

    def test_clear_is_idempotent(self, trust_service):
        trust_service.add_or_update_trust("maan", "alex", 3)
        trust_service.clear_update_flag("maan", "alex")

        assert trust_service.clear_update_flag("maan", "alex").data is True

    def test_clear_untrusted_pair_reports_false(self, trust_service):
        assert trust_service.clear_update_flag("maan", "sam").data is False

    def test_mark_untrusted_pair_is_not_found(self, trust_service):
        assert trust_service.mark_updated("maan", "sam").error_code == ErrorCode.NOT_FOUND

    def test_mark_for_reviewer_reaches_every_follower(self, trust_service):
        trust_service.add_or_update_trust("maan", "alex", 3)
        trust_service.add_or_update_trust("riya", "alex", 1)
        trust_service.add_or_update_trust("riya", "sam", 2)

        result = trust_service.mark_updated_for_reviewer("alex")

        assert result.data == 2
        assert trust_service.list_updated("maan").data == {"alex"}
        assert trust_service.list_updated("riya").data == {"alex"}

    def test_mark_for_reviewer_without_followers(self, trust_service):
        assert trust_service.mark_updated_for_reviewer("sam").data == 0

    def test_weight_change_keeps_unseen_flag(self, trust_service):
        trust_service.add_or_update_trust("maan", "alex", 3)
        trust_service.mark_updated("maan", "alex")
        trust_service.add_or_update_trust("maan", "alex", 4)

        assert trust_service.has_unseen_update("maan", "alex").data is True

    def test_has_unseen_update_for_unknown_pair(self, trust_service):
        assert trust_service.has_unseen_update("maan", "nobody").data is False
