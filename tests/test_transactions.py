"""Transaction boundaries: read release, write guards and connections sharing one file."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import update

from campusqa.models.moderation import Flag
from campusqa.models.review import TrustedReviewer
from campusqa.repositories.review import TrustedReviewerRepository
from campusqa.services.base.service_factory import ServiceFactory
from campusqa.services.base.service_result import ErrorCode


def _pending_flag(item_id="77"):
    return Flag(flag_type="ANSWER", item_id=item_id, flagged_by="stella", reason="Spam", is_resolved=False)


# ---------------------------------------------------------------------------
# Read scope
# ---------------------------------------------------------------------------


class TestReadScope:
    def test_reads_end_their_transaction(self, review_service, trust_service, flag_service, db):
        review_service.submit_review("alex", "answer", 2002, 2, "Needs work")

        assert review_service.get_history_for("alex", 2002).is_success
        assert not db.in_transaction()
        assert trust_service.list_updated("maan").is_success
        assert not db.in_transaction()
        assert flag_service.list_unresolved().is_success
        assert not db.in_transaction()

    def test_role_check_ends_its_transaction(self, flag_service, db):
        result = flag_service.file_flag("ANSWER", 1, "maan", "meh")

        assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS
        assert not db.in_transaction()

    def test_pending_objects_are_not_committed(self, review_service, flag_service, db):
        flag = _pending_flag()
        db.add(flag)

        assert review_service.get_history_for("alex", 2002).is_success
        assert flag in db.new

        db.rollback()
        assert flag_service.list_by_item("77").data == []

    def test_flushed_writes_are_not_committed(self, review_service, flag_service, db):
        db.add(_pending_flag())
        db.flush()

        assert review_service.get_history_for("alex", 2002).is_success
        assert db.in_transaction()

        db.rollback()
        assert flag_service.list_by_item("77").data == []

    def test_bulk_updates_are_not_committed(self, trust_service, db):
        trust_service.add_or_update_trust("maan", "alex", 3)
        db.execute(update(TrustedReviewer).values(weight=5))

        assert trust_service.list_trusted("maan").data == {"alex": 5}

        db.rollback()
        assert trust_service.list_trusted("maan").data == {"alex": 3}

    def test_read_inside_transaction_leaves_it_open(self, review_service, db):
        with review_service.transaction():
            assert review_service.get_history_for("alex", 2002).is_success
            assert db.in_transaction()
        assert not db.in_transaction()


# ---------------------------------------------------------------------------
# Repository writes
# ---------------------------------------------------------------------------


class TestRepositoryWrites:
    def test_create_is_undone_by_rollback(self, db):
        repo = TrustedReviewerRepository(db)
        repo.create(TrustedReviewer(student_username="maan", reviewer_username="alex", weight=2))

        db.rollback()

        assert repo.find_pair("maan", "alex") is None

    def test_delete_is_undone_by_rollback(self, db):
        repo = TrustedReviewerRepository(db)
        repo.create(TrustedReviewer(student_username="maan", reviewer_username="alex", weight=2))
        db.commit()

        repo.delete(repo.find_pair("maan", "alex"))
        db.rollback()

        assert repo.find_pair("maan", "alex", refresh=True) is not None


# ---------------------------------------------------------------------------
# Serializable writes with uncommitted work in the session
# ---------------------------------------------------------------------------


class TestSerializableGuard:
    def test_pending_objects_block_chain_write(self, review_service, flag_service, db):
        first = review_service.submit_review("alex", "answer", 2002, 2, "Needs work").data
        flag = _pending_flag()
        db.add(flag)

        result = review_service.update_review(first.id, 5, "Fixed")

        assert result.error_code == ErrorCode.STORAGE_ERROR
        assert flag in db.new
        db.rollback()
        assert len(review_service.get_history_for("alex", 2002).data) == 1
        assert flag_service.list_by_item("77").data == []

    def test_flushed_writes_block_chain_write(self, review_service, flag_service, db):
        db.add(_pending_flag())
        db.flush()

        result = review_service.submit_review("alex", "answer", 2002, 2, "Needs work")

        assert result.error_code == ErrorCode.STORAGE_ERROR
        db.rollback()
        assert review_service.get_latest_for("alex", "answer", 2002).data is None
        assert flag_service.list_by_item("77").data == []

    def test_clean_session_is_unaffected(self, review_service, db):
        first = review_service.submit_review("alex", "answer", 2002, 2, "Needs work").data
        review_service.get_history_for("alex", 2002)

        assert review_service.update_review(first.id, 5, "Fixed").is_success


# ---------------------------------------------------------------------------
# Two connections on one database file
# ---------------------------------------------------------------------------


class TestSharedDatabase:
    @pytest.fixture
    def mine(self, two_sessions, open_config):
        return ServiceFactory(two_sessions[0], open_config)

    @pytest.fixture
    def theirs(self, two_sessions, open_config):
        return ServiceFactory(two_sessions[1], open_config)

    def test_read_does_not_block_other_writer(self, mine, theirs, two_sessions):
        first = mine.reviews().submit_review("alex", "answer", 2002, 2, "Needs work").data
        assert len(mine.reviews().get_history_for("alex", 2002).data) == 1
        assert not two_sessions[0].in_transaction()

        result = theirs.reviews().update_review(first.id, 4, "Better")

        assert result.is_success, result.message
        history = mine.reviews().get_history_for("alex", 2002).data
        assert [r.rating for r in history] == [2, 4]
        assert mine.reviews().get_latest_for("alex", "answer", 2002).data.id == result.data.id

    def test_history_has_one_latest_after_other_update(self, mine, theirs):
        first = mine.reviews().submit_review("alex", "answer", 2002, 2, "Needs work").data
        before = mine.reviews().get_history_for("alex", 2002).data
        assert [r.is_latest for r in before] == [True]

        assert theirs.reviews().update_review(first.id, 4, "Better").is_success

        after = mine.reviews().get_history_for("alex", 2002).data
        assert [r.is_latest for r in after] == [False, True]
        assert mine.reviews().get_review(first.id).data.is_latest is False
        assert len(mine.reviews().list_by_reviewer("alex", latest_only=True).data) == 1
        assert len(mine.reviews().get_latest_for_target("answer", 2002).data) == 1

    def test_stale_update_from_other_session_conflicts(self, mine, theirs):
        first = mine.reviews().submit_review("alex", "answer", 2002, 2, "Needs work").data
        assert theirs.reviews().update_review(first.id, 4, "Better").is_success

        result = mine.reviews().update_review(first.id, 5, "Mine")

        assert result.error_code == ErrorCode.CONFLICT
        assert len(mine.reviews().get_history_for("alex", 2002).data) == 2

    def test_trust_changes_are_seen(self, mine, theirs):
        assert theirs.trust().add_or_update_trust("maan", "alex", 3).is_success
        assert mine.trust().list_trusted("maan").data == {"alex": 3}
        assert mine.trust().has_unseen_update("maan", "alex").data is False
        assert mine.trust().list_updated("maan").data == set()

        assert theirs.trust().mark_updated("maan", "alex").is_success
        assert theirs.trust().add_or_update_trust("maan", "alex", 5).is_success

        assert mine.trust().has_unseen_update("maan", "alex").data is True
        assert mine.trust().list_updated("maan").data == {"alex"}
        assert mine.trust().list_trusted("maan").data == {"alex": 5}

    def test_flag_resolution_is_seen(self, mine, theirs):
        assert mine.flags().file_flag("ANSWER", 2002, "stella", "Spam").is_success
        assert mine.flags().list_by_item(2002).data[0].is_resolved is False

        assert theirs.flags().resolve(2002, "ANSWER", "stella").data == 1

        assert mine.flags().list_by_item(2002).data[0].is_resolved is True
        assert mine.flags().is_resolved(2002, "ANSWER").data is True
        assert mine.flags().list_unresolved().data == []

    def test_concurrent_updates_have_one_winner(self, mine, file_session_factory, open_config):
        first = mine.reviews().submit_review("alex", "answer", 2002, 2, "Needs work").data
        barrier = threading.Barrier(2)

        def contend(rating):
            session = file_session_factory()
            try:
                service = ServiceFactory(session, open_config).reviews()
                barrier.wait(timeout=5)
                return service.update_review(first.id, rating, f"Rated {rating}")
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(contend, [3, 4]))

        winners = [r for r in results if r.is_success]
        assert len(winners) == 1
        assert [r.error_code for r in results if not r.is_success] == [ErrorCode.CONFLICT]

        history = mine.reviews().get_history_for("alex", 2002).data
        assert [r.is_latest for r in history] == [False, True]
        assert history[-1].id == winners[0].data.id
