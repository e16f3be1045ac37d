"""
Flag repository for the moderation ledger.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusqa.models.base import utcnow
from campusqa.models.moderation import Flag
from campusqa.repositories.base.base_repository import BaseRepository


class FlagRepository(BaseRepository[Flag]):
    """Append-only flag ledger."""

    def __init__(self, db: Session):
        super().__init__(Flag, db)

    def list_by_item(self, item_id: str, flag_type: Optional[str] = None) -> List[Flag]:
        criteria = {"item_id": str(item_id)}
        if flag_type is not None:
            criteria["flag_type"] = flag_type
        return self.find_by_criteria(criteria, order_by=["created_at", "id"], refresh=True)

    def list_unresolved(self, flag_type: Optional[str] = None) -> List[Flag]:
        criteria = {"is_resolved": False}
        if flag_type is not None:
            criteria["flag_type"] = flag_type
        return self.find_by_criteria(criteria, order_by=["created_at", "id"], refresh=True)

    def list_by_type(self, flag_type: str) -> List[Flag]:
        return self.find_by_criteria({"flag_type": flag_type}, order_by=["created_at", "id"], refresh=True)

    def count_for_item(self, item_id: str, flag_type: str, unresolved_only: bool = False) -> int:
        criteria = {"item_id": str(item_id), "flag_type": flag_type}
        if unresolved_only:
            criteria["is_resolved"] = False
        return self.count(criteria)

    def count_unresolved_by_user(self, username: str) -> int:
        return self.count({"flagged_by": username, "is_resolved": False})

    def resolve_item(
        self,
        item_id: str,
        flag_type: str,
        resolved_by: Optional[str] = None,
        when: Optional[datetime] = None,
    ) -> int:
        """Resolve every unresolved flag on an item. Returns rows changed."""
        try:
            result = self.db.execute(
                update(Flag)
                .where(
                    Flag.item_id == str(item_id),
                    Flag.flag_type == flag_type,
                    Flag.is_resolved == False,  # noqa: E712
                )
                .values(is_resolved=True, resolved_by=resolved_by, resolved_at=when or utcnow())
            )
        except SQLAlchemyError as e:
            raise self._wrap(e, "resolve_item") from e
        return result.rowcount
