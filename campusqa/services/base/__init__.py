"""
Service layer foundations: results, the base service and the factory.
"""

from campusqa.services.base.base_service import BaseService
from campusqa.services.base.service_factory import ServiceFactory
from campusqa.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = [
    "BaseService",
    "ServiceFactory",
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
