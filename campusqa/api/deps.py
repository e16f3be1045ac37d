"""
FastAPI dependencies and service-result translation.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from campusqa.api import deps

    router = APIRouter()

    @router.get("/students/{student}/trusted")
    def trusted(student: str, services: ServiceFactory = Depends(deps.get_services)):
        ...
"""

from typing import Any, Dict

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from campusqa.db.session import get_db
from campusqa.services.base.service_factory import ServiceFactory
from campusqa.services.base.service_result import ErrorCode, ServiceResult

ERROR_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INSUFFICIENT_PERMISSIONS: 403,
}


def get_services(db: Session = Depends(get_db)) -> ServiceFactory:
    return ServiceFactory(db)


def unwrap(result: ServiceResult) -> Any:
    """
    Return the data of a successful result or raise the matching HTTP error.

    Unmapped error codes become 500.
    """
    if result.is_success:
        return result.data
    error = result.error
    raise HTTPException(
        status_code=ERROR_STATUS.get(error.code, 500),
        detail={
            "code": error.code.value,
            "message": error.message,
            "field": error.field,
            "details": error.details,
        },
    )
