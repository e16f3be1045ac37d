"""
Review version chain service.

Reviews are immutable per version. Submitting creates the first version of
a reviewer's review of a target; updating inserts a successor linked to the
previous latest version and clears that version's latest flag in the same
serializable transaction. Each successful write raises the unseen-update
flag for every student who trusts the reviewer.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from campusqa.config.settings import Settings
from campusqa.core.constants import (
    MAX_RATING,
    MAX_USERNAME_LENGTH,
    MIN_RATING,
    REVIEW_ROLES,
)
from campusqa.core.exceptions import ValidationError
from campusqa.models.base import TargetType
from campusqa.models.review import Review
from campusqa.repositories.content import MessageRepository
from campusqa.repositories.review import ReviewRepository
from campusqa.services.base.base_service import BaseService
from campusqa.services.base.service_result import ServiceResult
from campusqa.services.review.trust_service import TrustService


@dataclass
class WeightedReview:
    """A latest review annotated with the viewing student's trust weight."""

    review: Review
    weight: int
    trusted: bool


class ReviewService(BaseService):
    """Submit, update, delete and query versioned reviews."""

    def __init__(
        self,
        db_session: Session,
        config: Optional[Settings] = None,
        trust_service: Optional[TrustService] = None,
    ):
        super().__init__(db_session, config)
        self.repository = ReviewRepository(db_session)
        self.messages = MessageRepository(db_session)
        self.trust_service = trust_service or TrustService(db_session, config)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _target_type(value: Any) -> str:
        try:
            return TargetType(value.lower() if isinstance(value, str) else value).value
        except ValueError:
            raise ValidationError(
                f"target_type must be one of {[t.value for t in TargetType]}",
                field="target_type",
            )

    @staticmethod
    def _target_id(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("target_id must be an integer", field="target_id")
        return value

    def _rating(self, value: Any) -> int:
        return self._require_int_in_range(value, "rating", MIN_RATING, MAX_RATING)

    @staticmethod
    def _comment(value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def _notify_trusting_students(self, reviewer: str) -> Dict[str, Any]:
        """
        Raise the unseen-update flag for the reviewer's followers.

        A failure here is reported in the metadata; the review itself has
        already been committed.
        """
        result = self.trust_service.mark_updated_for_reviewer(reviewer)
        if result.is_success:
            return {"notified_students": result.data}
        self._logger.warning(
            f"Review by {reviewer} saved but trust notification failed: {result.message}"
        )
        return {"notified_students": 0, "notification_error": result.message}

    # -------------------------------------------------------------------------
    # Version chain
    # -------------------------------------------------------------------------

    def submit_review(
        self,
        reviewer: str,
        target_type: str,
        target_id: int,
        rating: int,
        comment: Optional[str] = None,
    ) -> ServiceResult[Review]:
        """
        Create the first version of a review.

        Fails with CONFLICT when the reviewer already has a latest review
        of this target; use update_review for that.
        """
        try:
            reviewer = self._require_text(reviewer, "reviewer_username", MAX_USERNAME_LENGTH)
            target_type = self._target_type(target_type)
            target_id = self._target_id(target_id)
            rating = self._rating(rating)
            comment = self._comment(comment)
            self._require_role(reviewer, REVIEW_ROLES, "submit reviews")

            with self.transaction(serializable=True):
                existing = self.repository.find_latest(reviewer, target_type, target_id)
                if existing is not None:
                    return ServiceResult.conflict(
                        f"{reviewer} already reviewed {target_type} {target_id}; update review {existing.id} instead",
                        details={"existing_review_id": existing.id},
                    )
                review = self.repository.create(Review(
                    reviewer_username=reviewer,
                    target_type=target_type,
                    target_id=target_id,
                    rating=rating,
                    comment=comment,
                    previous_review_id=None,
                    is_latest=True,
                ))

            self._logger.info(f"Review {review.id} submitted by {reviewer} for {target_type} {target_id}")
            metadata = {"changed": True}
            metadata.update(self._notify_trusting_students(reviewer))
            return ServiceResult.success(review, message="Review submitted", metadata=metadata)
        except Exception as e:
            return self._handle_exception(e, "submit review", f"{reviewer}:{target_type}:{target_id}")

    def update_review(
        self,
        existing_latest_id: int,
        new_rating: int,
        new_comment: Optional[str] = None,
    ) -> ServiceResult[Review]:
        """
        Create a new version of a review.

        Returns the unchanged row with metadata changed=False when rating
        and comment match the current version. Fails with CONFLICT if the
        given review is not (or is no longer) the latest version.
        """
        try:
            rating = self._rating(new_rating)
            comment = self._comment(new_comment)

            with self.transaction(serializable=True):
                current = self.repository.find_by_id(existing_latest_id, refresh=True)
                if current is None:
                    return ServiceResult.not_found("Review", existing_latest_id)
                if not current.is_latest:
                    return ServiceResult.conflict(
                        f"Review {current.id} has been superseded",
                        details={"review_id": current.id},
                    )
                if current.same_content(rating, comment):
                    return ServiceResult.success(
                        current,
                        message="Review unchanged",
                        metadata={"changed": False},
                    )
                successor = self.repository.supersede_latest(current, rating, comment)

            self._logger.info(f"Review {current.id} superseded by {successor.id}")
            metadata = {"changed": True, "previous_review_id": current.id}
            metadata.update(self._notify_trusting_students(successor.reviewer_username))
            return ServiceResult.success(successor, message="Review updated", metadata=metadata)
        except Exception as e:
            return self._handle_exception(e, "update review", existing_latest_id)

    def delete_review_and_history(self, review_id: int) -> ServiceResult[bool]:
        """
        Delete a review version and every ancestor reachable from it.

        The data is False when review_id does not exist. Later versions
        that pointed into the deleted chain are kept and detached.
        """
        try:
            with self.transaction(serializable=True):
                ids = self.repository.ancestor_ids(review_id)
                if not ids:
                    return ServiceResult.success(False, message="Review not found")
                deleted = self.repository.delete_chain(ids)

            self._logger.info(f"Deleted review {review_id} and {deleted - 1} earlier versions")
            return ServiceResult.success(
                True,
                message="Review history deleted",
                metadata={"deleted_ids": ids, "deleted_count": deleted},
            )
        except Exception as e:
            return self._handle_exception(e, "delete review history", review_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_review(self, review_id: int) -> ServiceResult[Review]:
        try:
            with self.read_scope():
                review = self.repository.find_by_id(review_id, refresh=True)
            if review is None:
                return ServiceResult.not_found("Review", review_id)
            return ServiceResult.success(review)
        except Exception as e:
            return self._handle_exception(e, "get review", review_id)

    def get_latest_for(
        self,
        reviewer: str,
        target_type: str,
        target_id: int,
    ) -> ServiceResult[Optional[Review]]:
        """The latest version, or None when the reviewer has not reviewed the target."""
        try:
            target_type = self._target_type(target_type)
            with self.read_scope():
                latest = self.repository.find_latest(reviewer, target_type, target_id)
            return ServiceResult.success(latest)
        except Exception as e:
            return self._handle_exception(e, "get latest review", f"{reviewer}:{target_type}:{target_id}")

    def get_history_for(
        self,
        reviewer: str,
        target_id: int,
        target_type: Optional[str] = None,
    ) -> ServiceResult[List[Review]]:
        """Every version, oldest to newest by chain linkage."""
        try:
            if target_type is not None:
                target_type = self._target_type(target_type)
            with self.read_scope():
                history = self.repository.history_for(reviewer, target_id, target_type)
            return ServiceResult.success(history)
        except Exception as e:
            return self._handle_exception(e, "get review history", f"{reviewer}:{target_id}")

    def get_latest_for_target(self, target_type: str, target_id: int) -> ServiceResult[List[Review]]:
        try:
            target_type = self._target_type(target_type)
            with self.read_scope():
                reviews = self.repository.latest_for_target(target_type, target_id)
            return ServiceResult.success(reviews)
        except Exception as e:
            return self._handle_exception(e, "list reviews for target", f"{target_type}:{target_id}")

    def list_by_reviewer(self, reviewer: str, latest_only: bool = False) -> ServiceResult[List[Review]]:
        try:
            with self.read_scope():
                reviews = self.repository.list_by_reviewer(reviewer, latest_only)
            return ServiceResult.success(reviews)
        except Exception as e:
            return self._handle_exception(e, "list reviews by reviewer", reviewer)

    def reviewer_scorecard(self, reviewer: str) -> ServiceResult[Dict[str, Any]]:
        """Summary of a reviewer's current reviews and the feedback they received."""
        try:
            reviewer = self._require_text(reviewer, "reviewer_username", MAX_USERNAME_LENGTH)
            with self.read_scope():
                stats = self.repository.latest_rating_stats(reviewer)
                feedback_count = self.messages.count_feedback_for(reviewer)
            scorecard = {
                "reviewer": reviewer,
                "review_count": stats["review_count"],
                "average_rating": stats["average_rating"],
                "feedback_count": feedback_count,
            }
            return ServiceResult.success(scorecard)
        except Exception as e:
            return self._handle_exception(e, "build reviewer scorecard", reviewer)

    def weighted_reviews_for_target(
        self,
        student: str,
        target_type: str,
        target_id: int,
    ) -> ServiceResult[List[WeightedReview]]:
        """
        Latest reviews of a target ordered for one student.

        Reviews by trusted reviewers come first, heaviest weight first;
        untrusted reviews follow with weight 0. Ties keep newest first.
        """
        try:
            target_type = self._target_type(target_type)
            weights_result = self.trust_service.list_trusted(student)
            if not weights_result:
                return weights_result
            weights = weights_result.data

            with self.read_scope():
                reviews = self.repository.latest_for_target(target_type, target_id)
            weighted = [
                WeightedReview(
                    review=r,
                    weight=weights.get(r.reviewer_username, 0),
                    trusted=r.reviewer_username in weights,
                )
                for r in reviews
            ]
            # Stable sort preserves newest-first among equal weights
            weighted.sort(key=lambda w: w.weight, reverse=True)
            return ServiceResult.success(weighted)
        except Exception as e:
            return self._handle_exception(e, "weight reviews for student", f"{student}:{target_type}:{target_id}")
