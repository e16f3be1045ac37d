"""
Trusted reviewer registry service.

Students trust reviewers with a weight in [1, 5]. Each trust entry carries
an unseen-update flag that is raised whenever the reviewer posts a new
review version and lowered when the student opens the reviewer's profile.
"""

from typing import Dict, Optional, Set

from sqlalchemy.orm import Session

from campusqa.config.settings import Settings
from campusqa.core.constants import (
    DEFAULT_TRUST_WEIGHT,
    MAX_TRUST_WEIGHT,
    MAX_USERNAME_LENGTH,
    MIN_TRUST_WEIGHT,
)
from campusqa.core.exceptions import NotFoundError, ValidationError
from campusqa.models.review import TrustedReviewer
from campusqa.repositories.review import TrustedReviewerRepository
from campusqa.services.base.base_service import BaseService
from campusqa.services.base.service_result import ServiceResult


class TrustService(BaseService):
    """Manages each student's trusted reviewers."""

    def __init__(self, db_session: Session, config: Optional[Settings] = None):
        super().__init__(db_session, config)
        self.repository = TrustedReviewerRepository(db_session)

    def _pair(self, student: str, reviewer: str):
        student = self._require_text(student, "student_username", MAX_USERNAME_LENGTH)
        reviewer = self._require_text(reviewer, "reviewer_username", MAX_USERNAME_LENGTH)
        return student, reviewer

    def add_or_update_trust(
        self,
        student: str,
        reviewer: str,
        weight: int = DEFAULT_TRUST_WEIGHT,
    ) -> ServiceResult[TrustedReviewer]:
        """
        Trust a reviewer, or change the weight of an existing trust entry.

        Repeating the call with the same weight leaves a single unchanged
        entry.
        """
        try:
            student, reviewer = self._pair(student, reviewer)
            if student == reviewer:
                raise ValidationError("A student cannot trust themselves", field="reviewer_username")
            weight = self._require_int_in_range(weight, "weight", MIN_TRUST_WEIGHT, MAX_TRUST_WEIGHT)

            with self.transaction():
                existed = self.repository.find_pair(student, reviewer, refresh=True) is not None
                entry = self.repository.upsert(student, reviewer, weight)

            self._logger.info(
                f"{student} {'updated' if existed else 'added'} trust in {reviewer} (weight={weight})"
            )
            return ServiceResult.success(
                entry,
                message="Trust updated" if existed else "Reviewer trusted",
                metadata={"created": not existed},
            )
        except Exception as e:
            return self._handle_exception(e, "add or update trust", f"{student}->{reviewer}")

    def remove_trust(self, student: str, reviewer: str) -> ServiceResult[bool]:
        try:
            student, reviewer = self._pair(student, reviewer)
            with self.transaction():
                removed = self.repository.remove(student, reviewer)
            return ServiceResult.success(removed)
        except Exception as e:
            return self._handle_exception(e, "remove trust", f"{student}->{reviewer}")

    def mark_updated(self, student: str, reviewer: str) -> ServiceResult[bool]:
        """Raise the unseen-update flag for one (student, reviewer) pair."""
        try:
            student, reviewer = self._pair(student, reviewer)
            with self.transaction():
                if self.repository.set_unseen(reviewer, True, student) == 0:
                    raise NotFoundError("TrustedReviewer", f"{student}->{reviewer}")
            return ServiceResult.success(True)
        except Exception as e:
            return self._handle_exception(e, "mark reviewer updated", f"{student}->{reviewer}")

    def mark_updated_for_reviewer(self, reviewer: str) -> ServiceResult[int]:
        """
        Raise the unseen-update flag for every student trusting reviewer.

        Returns the number of trust entries touched.
        """
        try:
            reviewer = self._require_text(reviewer, "reviewer_username", MAX_USERNAME_LENGTH)
            with self.transaction():
                touched = self.repository.set_unseen(reviewer, True)
            if touched:
                self._logger.debug(f"Flagged {touched} students about an update from {reviewer}")
            return ServiceResult.success(touched)
        except Exception as e:
            return self._handle_exception(e, "mark reviewer updated for students", reviewer)

    def clear_update_flag(self, student: str, reviewer: str) -> ServiceResult[bool]:
        """
        Lower the unseen-update flag when the student views the reviewer.

        Idempotent; the data is False when the student does not trust the
        reviewer at all.
        """
        try:
            student, reviewer = self._pair(student, reviewer)
            with self.transaction():
                matched = self.repository.set_unseen(reviewer, False, student)
            return ServiceResult.success(matched > 0)
        except Exception as e:
            return self._handle_exception(e, "clear update flag", f"{student}->{reviewer}")

    def list_trusted(self, student: str) -> ServiceResult[Dict[str, int]]:
        """Mapping of reviewer username to trust weight."""
        try:
            student = self._require_text(student, "student_username", MAX_USERNAME_LENGTH)
            with self.read_scope():
                weights = self.repository.weights_for_student(student)
            return ServiceResult.success(weights)
        except Exception as e:
            return self._handle_exception(e, "list trusted reviewers", student)

    def list_updated(self, student: str) -> ServiceResult[Set[str]]:
        """Trusted reviewers with an update the student has not seen."""
        try:
            student = self._require_text(student, "student_username", MAX_USERNAME_LENGTH)
            with self.read_scope():
                updated = self.repository.updated_reviewers(student)
            return ServiceResult.success(updated)
        except Exception as e:
            return self._handle_exception(e, "list updated reviewers", student)

    def has_unseen_update(self, student: str, reviewer: str) -> ServiceResult[bool]:
        try:
            student, reviewer = self._pair(student, reviewer)
            with self.read_scope():
                entry = self.repository.find_pair(student, reviewer, refresh=True)
                unseen = bool(entry and entry.has_unseen_update)
            return ServiceResult.success(unseen)
        except Exception as e:
            return self._handle_exception(e, "check unseen update", f"{student}->{reviewer}")
