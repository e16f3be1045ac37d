"""
Review repository: version-chain persistence and queries.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusqa.core.exceptions import ConcurrencyError
from campusqa.core.logging import get_logger
from campusqa.models.review import Review
from campusqa.repositories.base.base_repository import BaseRepository

logger = get_logger(__name__)


def order_by_chain(reviews: Iterable[Review]) -> List[Review]:
    """
    Order review versions oldest to newest by previous_review_id linkage.

    Timestamps are only used to order independent chains relative to each
    other; within a chain the links alone decide the order. Rows whose
    predecessor is missing from the input start a new chain.
    """
    rows = list(reviews)
    by_id: Dict[int, Review] = {r.id: r for r in rows}
    successors: Dict[int, List[Review]] = {}
    roots: List[Review] = []

    for review in rows:
        prev = review.previous_review_id
        if prev is None or prev not in by_id:
            roots.append(review)
        else:
            successors.setdefault(prev, []).append(review)

    def sort_key(r: Review):
        created = r.created_at
        if created is not None and created.tzinfo is not None:
            created = created.astimezone(timezone.utc).replace(tzinfo=None)
        return (created is None, created or datetime.min, r.id)

    ordered: List[Review] = []
    seen: Set[int] = set()
    for root in sorted(roots, key=sort_key):
        node: Optional[Review] = root
        while node is not None and node.id not in seen:
            ordered.append(node)
            seen.add(node.id)
            children = sorted(successors.get(node.id, []), key=lambda r: r.id)
            node = children[0] if children else None

    # Anything unreachable from a root (a corrupted cycle) goes last
    ordered.extend(r for r in sorted(rows, key=lambda r: r.id) if r.id not in seen)
    return ordered


class ReviewRepository(BaseRepository[Review]):
    """Persistence for review versions."""

    def __init__(self, db: Session):
        super().__init__(Review, db)

    # ==================== Latest version ====================

    def find_latest(
        self,
        reviewer_username: str,
        target_type: str,
        target_id: int,
    ) -> Optional[Review]:
        return self.find_one_by_criteria({
            "reviewer_username": reviewer_username,
            "target_type": target_type,
            "target_id": target_id,
            "is_latest": True,
        }, refresh=True)

    def latest_for_target(self, target_type: str, target_id: int) -> List[Review]:
        """Latest version of every reviewer's review of one target, newest first."""
        return self.find_by_criteria(
            {"target_type": target_type, "target_id": target_id, "is_latest": True},
            order_by=["-created_at", "-id"],
            refresh=True,
        )

    def list_by_reviewer(self, reviewer_username: str, latest_only: bool = False) -> List[Review]:
        criteria = {"reviewer_username": reviewer_username}
        if latest_only:
            criteria["is_latest"] = True
        return self.find_by_criteria(criteria, order_by=["-created_at", "-id"], refresh=True)

    # ==================== History ====================

    def history_for(
        self,
        reviewer_username: str,
        target_id: int,
        target_type: Optional[str] = None,
    ) -> List[Review]:
        """All versions a reviewer wrote for a target, in chain order."""
        criteria = {"reviewer_username": reviewer_username, "target_id": target_id}
        if target_type is not None:
            criteria["target_type"] = target_type
        return order_by_chain(self.find_by_criteria(criteria, refresh=True))

    def ancestor_ids(self, review_id: int) -> List[int]:
        """
        Ids reachable backward from review_id, starting with review_id itself.

        Returns an empty list when review_id does not exist.
        """
        ids: List[int] = []
        current = review_id
        try:
            while current is not None and current not in ids:
                prev = self.db.execute(
                    select(Review.id, Review.previous_review_id).where(Review.id == current)
                ).first()
                if prev is None:
                    break
                ids.append(prev.id)
                current = prev.previous_review_id
        except SQLAlchemyError as e:
            raise self._wrap(e, "ancestor_ids") from e
        return ids

    # ==================== Chain mutations ====================

    def supersede_latest(
        self,
        current: Review,
        rating: int,
        comment: Optional[str],
    ) -> Review:
        """
        Replace the latest version with a new one.

        The old row's flag is cleared only if it is still the latest; if
        another writer got there first nothing is changed and
        ConcurrencyError is raised. Must run inside the caller's
        transaction so both statements commit together.
        """
        try:
            result = self.db.execute(
                update(Review)
                .where(Review.id == current.id, Review.is_latest == True)  # noqa: E712
                .values(is_latest=False)
            )
        except SQLAlchemyError as e:
            raise self._wrap(e, "supersede") from e

        if result.rowcount != 1:
            raise ConcurrencyError(
                f"Review {current.id} is no longer the latest version",
                table=self.table_name,
                expected_state={"review_id": current.id, "is_latest": True},
            )

        successor = Review(
            reviewer_username=current.reviewer_username,
            target_type=current.target_type,
            target_id=current.target_id,
            rating=rating,
            comment=comment,
            previous_review_id=current.id,
            is_latest=True,
        )
        created = self.create(successor)
        logger.debug(f"Review {current.id} superseded by {created.id}")
        return created

    def delete_chain(self, ids: List[int]) -> int:
        """
        Delete the given review rows.

        Later versions pointing at a deleted row are detached rather than
        deleted. Returns the number of rows removed.
        """
        if not ids:
            return 0
        try:
            self.db.execute(
                update(Review)
                .where(Review.previous_review_id.in_(ids), Review.id.not_in(ids))
                .values(previous_review_id=None)
            )
            result = self.db.execute(delete(Review).where(Review.id.in_(ids)))
            return result.rowcount
        except SQLAlchemyError as e:
            raise self._wrap(e, "delete_chain") from e

    def delete_for_targets(self, target_type: str, target_ids: List[int]) -> int:
        """Delete every version of every review on the given targets."""
        if not target_ids:
            return 0
        try:
            result = self.db.execute(
                delete(Review).where(
                    Review.target_type == target_type,
                    Review.target_id.in_(target_ids),
                )
            )
            return result.rowcount
        except SQLAlchemyError as e:
            raise self._wrap(e, "delete_for_targets") from e

    # ==================== Aggregates ====================

    def latest_rating_stats(self, reviewer_username: str) -> Dict[str, float]:
        """Count and average rating of a reviewer's latest versions."""
        try:
            row = self.db.execute(
                select(func.count(Review.id), func.avg(Review.rating)).where(
                    Review.reviewer_username == reviewer_username,
                    Review.is_latest == True,  # noqa: E712
                )
            ).one()
        except SQLAlchemyError as e:
            raise self._wrap(e, "latest_rating_stats") from e
        count, average = row
        return {
            "review_count": int(count or 0),
            "average_rating": round(float(average), 2) if average is not None else None,
        }
