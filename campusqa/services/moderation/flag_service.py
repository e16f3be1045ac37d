"""
Moderation flag ledger service.
"""

from typing import Any, List, Optional

from sqlalchemy.orm import Session

from campusqa.config.settings import Settings
from campusqa.core.constants import FLAG_ROLES, MAX_FLAG_REASON_LENGTH, MAX_USERNAME_LENGTH
from campusqa.core.exceptions import NotFoundError, ValidationError
from campusqa.models.base import FlagType
from campusqa.models.moderation import Flag
from campusqa.repositories.moderation import FlagRepository
from campusqa.services.base.base_service import BaseService
from campusqa.services.base.service_result import ServiceResult


class FlagService(BaseService):
    """
    Files and resolves moderation flags.

    The ledger is append-only. Filing never checks for an existing flag on
    the same item; resolving moves every open flag on an item to resolved
    and is a no-op for flags that already are.
    """

    def __init__(self, db_session: Session, config: Optional[Settings] = None):
        super().__init__(db_session, config)
        self.repository = FlagRepository(db_session)

    @staticmethod
    def _flag_type(value: Any) -> str:
        try:
            return FlagType(value.upper() if isinstance(value, str) else value).value
        except ValueError:
            raise ValidationError(
                f"flag_type must be one of {[t.value for t in FlagType]}",
                field="flag_type",
            )

    @staticmethod
    def _item_id(value: Any) -> str:
        if value is None or not str(value).strip():
            raise ValidationError("item_id is required", field="item_id")
        return str(value).strip()

    def file_flag(
        self,
        flag_type: str,
        item_id: Any,
        flagged_by: str,
        reason: str,
    ) -> ServiceResult[Flag]:
        try:
            flag_type = self._flag_type(flag_type)
            item_id = self._item_id(item_id)
            flagged_by = self._require_text(flagged_by, "flagged_by", MAX_USERNAME_LENGTH)
            reason = self._require_text(reason, "reason", MAX_FLAG_REASON_LENGTH)
            self._require_role(flagged_by, FLAG_ROLES, "flag content")

            with self.transaction():
                flag = self.repository.create(Flag(
                    flag_type=flag_type,
                    item_id=item_id,
                    flagged_by=flagged_by,
                    reason=reason,
                    is_resolved=False,
                ))

            self._logger.info(f"{flagged_by} flagged {flag_type} {item_id}")
            return ServiceResult.success(flag, message="Flag filed")
        except Exception as e:
            return self._handle_exception(e, "file flag", f"{flag_type}:{item_id}")

    def resolve(
        self,
        item_id: Any,
        flag_type: str,
        resolved_by: Optional[str] = None,
    ) -> ServiceResult[int]:
        """
        Resolve every open flag on an item.

        Returns the number of flags that changed state; resolving an item
        whose flags are all resolved succeeds with 0. NOT_FOUND if the
        item was never flagged.
        """
        try:
            flag_type = self._flag_type(flag_type)
            item_id = self._item_id(item_id)
            if resolved_by is not None:
                resolved_by = self._require_text(resolved_by, "resolved_by", MAX_USERNAME_LENGTH)
                self._require_role(resolved_by, FLAG_ROLES, "resolve flags")

            with self.transaction():
                if self.repository.count_for_item(item_id, flag_type) == 0:
                    raise NotFoundError("Flag", f"{flag_type}:{item_id}")
                changed = self.repository.resolve_item(item_id, flag_type, resolved_by)

            if changed:
                self._logger.info(f"Resolved {changed} flags on {flag_type} {item_id}")
            return ServiceResult.success(
                changed,
                message="Flags resolved" if changed else "Already resolved",
                metadata={"already_resolved": changed == 0},
            )
        except Exception as e:
            return self._handle_exception(e, "resolve flags", f"{flag_type}:{item_id}")

    def is_resolved(self, item_id: Any, flag_type: str) -> ServiceResult[bool]:
        """True when the item has been flagged and no flag on it is still open."""
        try:
            flag_type = self._flag_type(flag_type)
            item_id = self._item_id(item_id)
            with self.read_scope():
                total = self.repository.count_for_item(item_id, flag_type)
                open_flags = self.repository.count_for_item(item_id, flag_type, unresolved_only=True)
            return ServiceResult.success(total > 0 and open_flags == 0)
        except Exception as e:
            return self._handle_exception(e, "check flag resolution", f"{flag_type}:{item_id}")

    def has_unresolved_flag(self, item_id: Any, flag_type: str) -> ServiceResult[bool]:
        try:
            flag_type = self._flag_type(flag_type)
            item_id = self._item_id(item_id)
            with self.read_scope():
                open_flags = self.repository.count_for_item(item_id, flag_type, unresolved_only=True)
            return ServiceResult.success(open_flags > 0)
        except Exception as e:
            return self._handle_exception(e, "check open flags", f"{flag_type}:{item_id}")

    def list_unresolved(self, flag_type: Optional[str] = None) -> ServiceResult[List[Flag]]:
        try:
            if flag_type is not None:
                flag_type = self._flag_type(flag_type)
            with self.read_scope():
                flags = self.repository.list_unresolved(flag_type)
            return ServiceResult.success(flags)
        except Exception as e:
            return self._handle_exception(e, "list unresolved flags")

    def list_by_item(self, item_id: Any, flag_type: Optional[str] = None) -> ServiceResult[List[Flag]]:
        try:
            item_id = self._item_id(item_id)
            if flag_type is not None:
                flag_type = self._flag_type(flag_type)
            with self.read_scope():
                flags = self.repository.list_by_item(item_id, flag_type)
            return ServiceResult.success(flags)
        except Exception as e:
            return self._handle_exception(e, "list flags for item", item_id)

    def list_by_type(self, flag_type: str) -> ServiceResult[List[Flag]]:
        try:
            flag_type = self._flag_type(flag_type)
            with self.read_scope():
                flags = self.repository.list_by_type(flag_type)
            return ServiceResult.success(flags)
        except Exception as e:
            return self._handle_exception(e, "list flags by type", flag_type)

    def unresolved_count_for_user(self, username: str) -> ServiceResult[int]:
        """Flags filed by username that are still open."""
        try:
            username = self._require_text(username, "username", MAX_USERNAME_LENGTH)
            with self.read_scope():
                count = self.repository.count_unresolved_by_user(username)
            return ServiceResult.success(count)
        except Exception as e:
            return self._handle_exception(e, "count unresolved flags", username)
