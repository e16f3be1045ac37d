"""
Trusted reviewer repository.
"""

from typing import Dict, List, Optional, Set

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusqa.models.review import TrustedReviewer
from campusqa.repositories.base.base_repository import BaseRepository


class TrustedReviewerRepository(BaseRepository[TrustedReviewer]):
    """Per-student trust entries keyed by (student, reviewer)."""

    def __init__(self, db: Session):
        super().__init__(TrustedReviewer, db)

    def find_pair(
        self,
        student_username: str,
        reviewer_username: str,
        refresh: bool = False,
    ) -> Optional[TrustedReviewer]:
        return self.find_by_id((student_username, reviewer_username), refresh=refresh)

    def upsert(self, student_username: str, reviewer_username: str, weight: int) -> TrustedReviewer:
        """Create the pair or overwrite its weight."""
        entry = self.find_pair(student_username, reviewer_username, refresh=True)
        if entry is None:
            entry = TrustedReviewer(
                student_username=student_username,
                reviewer_username=reviewer_username,
                weight=weight,
                has_unseen_update=False,
            )
            return self.create(entry)

        if entry.weight != weight:
            entry.weight = weight
            try:
                self.db.flush()
            except SQLAlchemyError as e:
                raise self._wrap(e, "upsert") from e
        return entry

    def list_for_student(self, student_username: str) -> List[TrustedReviewer]:
        return self.find_by_criteria(
            {"student_username": student_username},
            order_by=["-weight", "reviewer_username"],
            refresh=True,
        )

    def weights_for_student(self, student_username: str) -> Dict[str, int]:
        return {e.reviewer_username: e.weight for e in self.list_for_student(student_username)}

    def updated_reviewers(self, student_username: str) -> Set[str]:
        try:
            rows = self.db.scalars(
                select(TrustedReviewer.reviewer_username).where(
                    TrustedReviewer.student_username == student_username,
                    TrustedReviewer.has_unseen_update == True,  # noqa: E712
                )
            ).all()
        except SQLAlchemyError as e:
            raise self._wrap(e, "updated_reviewers") from e
        return set(rows)

    def set_unseen(
        self,
        reviewer_username: str,
        value: bool,
        student_username: Optional[str] = None,
    ) -> int:
        """
        Set has_unseen_update for one pair, or for every student trusting
        the reviewer when student_username is None. Returns rows matched.
        """
        stmt = update(TrustedReviewer).where(
            TrustedReviewer.reviewer_username == reviewer_username
        )
        if student_username is not None:
            stmt = stmt.where(TrustedReviewer.student_username == student_username)
        try:
            result = self.db.execute(stmt.values(has_unseen_update=value))
        except SQLAlchemyError as e:
            raise self._wrap(e, "set_unseen") from e
        return result.rowcount

    def remove(self, student_username: str, reviewer_username: str) -> bool:
        entry = self.find_pair(student_username, reviewer_username, refresh=True)
        if entry is None:
            return False
        self.delete(entry)
        return True
