"""
User directory service: roles and reviewer-role requests.
"""

from typing import Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from campusqa.config.settings import Settings
from campusqa.core.constants import (
    MAX_USERNAME_LENGTH,
    REVIEWER_REQUEST_DECIDER_ROLES,
    ROLE_REVIEWER,
    ROLE_STUDENT,
)
from campusqa.core.exceptions import NotFoundError, ValidationError
from campusqa.models.base import ReviewerRequestStatus, RoleName, utcnow
from campusqa.models.user import ReviewerRequest, User
from campusqa.repositories.user import ReviewerRequestRepository, UserRepository
from campusqa.services.base.base_service import BaseService
from campusqa.services.base.service_result import ServiceResult


class UserService(BaseService):
    """Username to role lookup plus the reviewer-role request workflow."""

    def __init__(self, db_session: Session, config: Optional[Settings] = None):
        super().__init__(db_session, config)
        self.repository = UserRepository(db_session)
        self.requests = ReviewerRequestRepository(db_session)

    @staticmethod
    def _role(value: str) -> str:
        try:
            return RoleName(str(value).strip().lower()).value
        except ValueError:
            raise ValidationError(
                f"role must be one of {[r.value for r in RoleName]}",
                field="role",
            )

    def _get_user(self, username: str) -> User:
        username = self._require_text(username, "username", MAX_USERNAME_LENGTH)
        user = self.repository.find_by_username(username, refresh=True)
        if user is None:
            raise NotFoundError("User", username)
        return user

    # -------------------------------------------------------------------------
    # Users and roles
    # -------------------------------------------------------------------------

    def register_user(
        self,
        username: str,
        roles: Iterable[str] = (ROLE_STUDENT,),
        display_name: Optional[str] = None,
    ) -> ServiceResult[User]:
        try:
            username = self._require_text(username, "username", MAX_USERNAME_LENGTH)
            role_names = {self._role(r) for r in roles}
            with self.transaction():
                if self.repository.find_by_username(username) is not None:
                    return ServiceResult.conflict(f"User '{username}' already exists")
                user = self.repository.create_user(username, role_names, display_name)
            self._logger.info(f"Registered user {username} with roles {sorted(role_names)}")
            return ServiceResult.success(user, message="User registered")
        except Exception as e:
            return self._handle_exception(e, "register user", username)

    def get_roles(self, username: str) -> ServiceResult[Set[str]]:
        try:
            with self.read_scope():
                user = self._get_user(username)
                roles = self.repository.role_names(user.username)
            return ServiceResult.success(roles)
        except Exception as e:
            return self._handle_exception(e, "get roles", username)

    def has_role(self, username: str, role: str) -> ServiceResult[bool]:
        """False for unknown users rather than NOT_FOUND."""
        try:
            role = self._role(role)
            with self.read_scope():
                roles = self.repository.role_names(username)
            return ServiceResult.success(role in roles)
        except Exception as e:
            return self._handle_exception(e, "check role", username)

    def add_role(self, username: str, role: str) -> ServiceResult[bool]:
        try:
            role = self._role(role)
            with self.transaction():
                added = self.repository.add_role(self._get_user(username), role)
            return ServiceResult.success(added)
        except Exception as e:
            return self._handle_exception(e, "add role", f"{username}:{role}")

    def remove_role(self, username: str, role: str) -> ServiceResult[bool]:
        try:
            role = self._role(role)
            with self.transaction():
                removed = self.repository.remove_role(self._get_user(username), role)
            return ServiceResult.success(removed)
        except Exception as e:
            return self._handle_exception(e, "remove role", f"{username}:{role}")

    # -------------------------------------------------------------------------
    # Reviewer-role requests
    # -------------------------------------------------------------------------

    def request_reviewer_role(self, username: str) -> ServiceResult[ReviewerRequest]:
        """
        Ask for the reviewer role.

        CONFLICT if the user already is a reviewer or already has a pending
        request. A previously decided request is reopened.
        """
        try:
            with self.transaction():
                user = self._get_user(username)
                if ROLE_REVIEWER in user.role_names:
                    return ServiceResult.conflict(f"User '{user.username}' is already a reviewer")

                request = self.requests.find_for_user(user.username)
                if request is not None and request.is_pending:
                    return ServiceResult.conflict(
                        f"User '{user.username}' already has a pending reviewer request"
                    )
                if request is None:
                    request = self.requests.create(ReviewerRequest(username=user.username))
                else:
                    request.status = ReviewerRequestStatus.PENDING.value
                    request.created_at = utcnow()
                    request.decided_at = None
                    request.decided_by = None
                    self.db.flush()

            self._logger.info(f"{request.username} requested the reviewer role")
            return ServiceResult.success(request, message="Reviewer request submitted")
        except Exception as e:
            return self._handle_exception(e, "request reviewer role", username)

    def list_pending_requests(self) -> ServiceResult[List[ReviewerRequest]]:
        try:
            with self.read_scope():
                pending = self.requests.list_pending()
            return ServiceResult.success(pending)
        except Exception as e:
            return self._handle_exception(e, "list pending reviewer requests")

    def get_request_status(self, username: str) -> ServiceResult[Optional[str]]:
        """Status of the user's request, or None when they never asked."""
        try:
            with self.read_scope():
                request = self.requests.find_for_user(username)
            return ServiceResult.success(request.status if request else None)
        except Exception as e:
            return self._handle_exception(e, "get reviewer request status", username)

    def _decide(self, username: str, decided_by: str, approve: bool) -> ServiceResult[ReviewerRequest]:
        decided_by = self._require_text(decided_by, "decided_by", MAX_USERNAME_LENGTH)
        self._require_role(decided_by, REVIEWER_REQUEST_DECIDER_ROLES, "decide reviewer requests")

        with self.transaction():
            request = self.requests.find_for_user(username)
            if request is None:
                raise NotFoundError("ReviewerRequest", username)
            if not request.is_pending:
                return ServiceResult.conflict(
                    f"Reviewer request for '{username}' was already {request.status}"
                )
            request.status = (
                ReviewerRequestStatus.APPROVED.value if approve else ReviewerRequestStatus.DENIED.value
            )
            request.decided_at = utcnow()
            request.decided_by = decided_by
            if approve:
                self.repository.add_role(self._get_user(username), ROLE_REVIEWER)
            self.db.flush()

        self._logger.info(f"{decided_by} {request.status} reviewer request of {username}")
        return ServiceResult.success(request, message=f"Reviewer request {request.status}")

    def approve_request(self, username: str, decided_by: str) -> ServiceResult[ReviewerRequest]:
        """Approve a pending request and grant the reviewer role."""
        try:
            return self._decide(username, decided_by, approve=True)
        except Exception as e:
            return self._handle_exception(e, "approve reviewer request", username)

    def deny_request(self, username: str, decided_by: str) -> ServiceResult[ReviewerRequest]:
        try:
            return self._decide(username, decided_by, approve=False)
        except Exception as e:
            return self._handle_exception(e, "deny reviewer request", username)
