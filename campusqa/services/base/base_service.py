"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from campusqa.config.settings import Settings, settings as default_settings
from campusqa.core.exceptions import (
    AuthorizationError,
    BaseAppException,
    ConcurrencyError,
    DuplicateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from campusqa.core.logging import get_logger
from campusqa.db.session import SQLITE_BEGIN_OPTION, has_uncommitted_writes, track_writes
from campusqa.repositories.user import UserRepository
from campusqa.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

# PostgreSQL SQLSTATE for serialization_failure
SERIALIZATION_FAILURE = "40001"

# Session.info key counting open transaction() blocks on the session
OPEN_UNITS = "campusqa.open_units"


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management, including serializable transactions
    - Role checks against the user directory
    """

    def __init__(self, db_session: Session, config: Optional[Settings] = None):
        """
        Initialize base service.

        Args:
            db_session: SQLAlchemy database session
            config: Settings override, defaults to the process settings
        """
        self.db: Session = track_writes(db_session)
        self.config: Settings = config or default_settings
        self._logger = get_logger(f"campusqa.services.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    _EXPECTED = (ValidationError, NotFoundError, AuthorizationError, DuplicateError, ConcurrencyError)

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure and log it.

        Expected domain failures are logged as warnings; storage and
        unexpected errors are logged with the traceback.
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        error_code = self._map_exception_to_error_code(exception)

        if isinstance(exception, self._EXPECTED) or isinstance(exception, ValueError):
            self._logger.warning(f"{operation} rejected: {exception}", extra=context)
            severity = ErrorSeverity.WARNING
        else:
            self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)
            severity = ErrorSeverity.ERROR

        if isinstance(exception, BaseAppException):
            message = exception.message
            details = dict(exception.details)
        elif isinstance(exception, ValueError):
            message = str(exception)
            details = {}
        else:
            message = f"Failed to {operation}"
            details = {"error": str(exception)}

        if entity_ref is not None:
            details["entity_ref"] = str(entity_ref)

        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=message,
                severity=severity,
                details=details,
                field=getattr(exception, "field", None),
            )
        )

    def _map_exception_to_error_code(self, exception: Exception) -> ErrorCode:
        exception_mapping = (
            (ValidationError, ErrorCode.VALIDATION_ERROR),
            (ValueError, ErrorCode.VALIDATION_ERROR),
            (NotFoundError, ErrorCode.NOT_FOUND),
            (AuthorizationError, ErrorCode.INSUFFICIENT_PERMISSIONS),
            (ConcurrencyError, ErrorCode.CONFLICT),
            (DuplicateError, ErrorCode.CONFLICT),
            (StorageError, ErrorCode.STORAGE_ERROR),
            (SQLAlchemyError, ErrorCode.STORAGE_ERROR),
        )
        for exc_type, error_code in exception_mapping:
            if isinstance(exception, exc_type):
                return error_code
        return ErrorCode.INTERNAL_ERROR

    @staticmethod
    def _translate_db_error(error: SQLAlchemyError) -> StorageError:
        """Map a driver error that escaped the repositories."""
        if isinstance(error, IntegrityError):
            return DuplicateError(f"Integrity constraint violated: {error.orig}")
        if isinstance(error, DBAPIError):
            if getattr(error.orig, "pgcode", None) == SERIALIZATION_FAILURE:
                return ConcurrencyError("Transaction could not be serialized with a concurrent writer")
            if isinstance(error, OperationalError) and "locked" in str(error.orig).lower():
                return ConcurrencyError("Database is locked by a concurrent writer")
        return StorageError(f"Database operation failed: {error}", operation="transaction")

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    def _serializable_options(self) -> Dict[str, Any]:
        if self.db.get_bind().dialect.name == "sqlite":
            return {SQLITE_BEGIN_OPTION: "IMMEDIATE"}
        return {"isolation_level": "SERIALIZABLE"}

    @contextmanager
    def transaction(self, serializable: bool = False):
        """
        Context manager for database transactions with automatic rollback.

        Args:
            serializable: Run the block in its own serializable transaction.
                On SQLite the write lock is taken at BEGIN; elsewhere the
                connection runs at SERIALIZABLE isolation.

        Yields:
            The database session

        Raises:
            StorageError: If serializable is requested while the session
                holds uncommitted writes or another transaction() block

        Example:
            with self.transaction(serializable=True):
                self.reviews.supersede_latest(current, rating, comment)
        """
        if serializable:
            # Isolation can only be chosen before the transaction starts, and
            # the caller's uncommitted work must not be committed on its behalf
            if has_uncommitted_writes(self.db) or self.db.info.get(OPEN_UNITS):
                raise StorageError(
                    "Serializable transaction requested while the session has uncommitted changes",
                    operation="transaction",
                )
            if self.db.in_transaction():
                self.db.commit()

        self.db.info[OPEN_UNITS] = self.db.info.get(OPEN_UNITS, 0) + 1
        try:
            if serializable:
                self.db.connection(execution_options=self._serializable_options())
            yield self.db
            self.db.commit()
            self._logger.debug("Transaction committed")
        except SQLAlchemyError as e:
            self._rollback()
            raise self._translate_db_error(e) from e
        except Exception:
            self._rollback()
            raise
        finally:
            self.db.info[OPEN_UNITS] -= 1

    @contextmanager
    def read_scope(self):
        """
        Run read-only work and end the transaction it opened.

        SQLite keeps a shared lock for as long as a transaction is open, so
        a read left open would block writers on other connections. The
        transaction is only committed when it carries no writes and no
        enclosing ``transaction()`` block is open; a caller's own unit of
        work is left untouched.

        Example:
            with self.read_scope():
                return ServiceResult.success(self.reviews.history_for(...))
        """
        try:
            yield self.db
        finally:
            self._release_read()

    def _release_read(self) -> None:
        if not self.db.in_transaction() or self.db.info.get(OPEN_UNITS):
            return
        if has_uncommitted_writes(self.db):
            return
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self._logger.warning(f"Releasing read transaction failed: {e}")
            self._rollback()

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except SQLAlchemyError as e:
            self._logger.warning(f"Rollback failed: {e}")

    # -------------------------------------------------------------------------
    # Validation helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> str:
        if value is None or not str(value).strip():
            raise ValidationError(f"{field} is required", field=field)
        value = str(value).strip()
        if max_length is not None and len(value) > max_length:
            raise ValidationError(f"{field} must not exceed {max_length} characters", field=field)
        return value

    @staticmethod
    def _require_int_in_range(value: Any, field: str, low: int, high: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must be an integer", field=field)
        if not low <= value <= high:
            raise ValidationError(f"{field} must be between {low} and {high}", field=field)
        return value

    def _require_role(self, username: str, allowed_roles: Iterable[str], action: str) -> None:
        """
        Raise AuthorizationError unless the user holds one of allowed_roles.

        Skipped entirely when ENFORCE_ROLE_CHECKS is off.
        """
        if not self.config.ENFORCE_ROLE_CHECKS:
            return
        allowed = set(allowed_roles)
        with self.read_scope():
            roles = UserRepository(self.db).role_names(username)
        if not roles & allowed:
            raise AuthorizationError(
                f"User '{username}' is not allowed to {action}",
                username=username,
                required_roles=sorted(allowed),
            )
