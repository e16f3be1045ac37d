"""
User and reviewer-request repositories.
"""

from typing import Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusqa.models.base import ReviewerRequestStatus
from campusqa.models.user import ReviewerRequest, User, UserRole
from campusqa.repositories.base.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Users and their role assignments."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def find_by_username(self, username: str, refresh: bool = False) -> Optional[User]:
        return self.find_by_id(username, refresh=refresh)

    def create_user(
        self,
        username: str,
        roles: Iterable[str] = (),
        display_name: Optional[str] = None,
    ) -> User:
        user = User(username=username, display_name=display_name)
        user.roles = [UserRole(role=role) for role in sorted(set(roles))]
        return self.create(user)

    def role_names(self, username: str) -> Set[str]:
        try:
            return set(self.db.scalars(
                select(UserRole.role).where(UserRole.username == username)
            ).all())
        except SQLAlchemyError as e:
            raise self._wrap(e, "role_names") from e

    def add_role(self, user: User, role: str) -> bool:
        """Grant a role. Returns False if the user already held it."""
        if role in user.role_names:
            return False
        user.roles.append(UserRole(role=role))
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            raise self._wrap(e, "add_role") from e
        return True

    def remove_role(self, user: User, role: str) -> bool:
        """Revoke a role. Returns False if the user did not hold it."""
        for assignment in list(user.roles):
            if assignment.role == role:
                user.roles.remove(assignment)
                try:
                    self.db.flush()
                except SQLAlchemyError as e:
                    raise self._wrap(e, "remove_role") from e
                return True
        return False


class ReviewerRequestRepository(BaseRepository[ReviewerRequest]):
    """Requests for the reviewer role, one row per user."""

    def __init__(self, db: Session):
        super().__init__(ReviewerRequest, db)

    def find_for_user(self, username: str) -> Optional[ReviewerRequest]:
        return self.find_one_by_criteria({"username": username}, refresh=True)

    def list_pending(self) -> List[ReviewerRequest]:
        return self.find_by_criteria(
            {"status": ReviewerRequestStatus.PENDING.value},
            order_by=["created_at", "id"],
            refresh=True,
        )
