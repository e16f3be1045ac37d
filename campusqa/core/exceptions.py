"""
Custom Exceptions for the CampusQA Review Platform

This module defines the exception taxonomy raised by repositories and
services. Services translate these into ServiceResult failures so that
callers never have to catch them across component boundaries.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Authorization
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ValidationError(BaseAppException):
    """Exception raised when data validation fails (bad rating, weight, missing field)"""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, error_code, details, 422)


class NotFoundError(BaseAppException):
    """Exception raised when a review, flag or trust pair does not exist"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id is not None:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": None if resource_id is None else str(resource_id),
        }
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class AuthorizationError(BaseAppException):
    """Exception raised when a user lacks the role required for an action"""

    def __init__(
        self,
        message: str = "Not authorized",
        username: Optional[str] = None,
        required_roles: Optional[List[str]] = None,
    ):
        details = {
            "username": username,
            "required_roles": sorted(required_roles) if required_roles else [],
        }
        super().__init__(message, ErrorCode.AUTHORIZATION_FAILED, details, 403)


class StorageError(BaseAppException):
    """Exception raised when the underlying persistence layer fails"""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        status_code: int = 500
    ):
        details = {
            "operation": operation,
            "table": table
        }
        super().__init__(message, error_code, details, status_code)


class DuplicateError(StorageError):
    """Exception raised when a unique constraint rejects a write"""

    def __init__(
        self,
        message: str = "Duplicate entry",
        table: Optional[str] = None,
    ):
        super().__init__(
            message,
            operation="insert",
            table=table,
            error_code=ErrorCode.DUPLICATE_ENTRY,
            status_code=409,
        )


class ConcurrencyError(StorageError):
    """Exception raised when a version-chain mutation loses a race"""

    def __init__(
        self,
        message: str = "Concurrent modification detected",
        table: Optional[str] = None,
        expected_state: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            operation="update",
            table=table,
            error_code=ErrorCode.CONCURRENT_MODIFICATION,
            status_code=409,
        )
        if expected_state:
            self.details["expected_state"] = expected_state


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
    "StorageError",
    "DuplicateError",
    "ConcurrencyError",
]
