"""
Trusted reviewer endpoints.
"""

from fastapi import APIRouter, Depends, status

from campusqa.api import deps
from campusqa.schemas.review import (
    TrustedReviewersResponse,
    TrustEntryResponse,
    TrustUpdate,
    UpdatedReviewersResponse,
)
from campusqa.services.base.service_factory import ServiceFactory
from campusqa.services.base.service_result import ServiceResult

router = APIRouter(prefix="/students/{student}", tags=["Trusted Reviewers"])


@router.put("/trusted/{reviewer}", response_model=TrustEntryResponse)
def trust_reviewer(
    student: str,
    reviewer: str,
    payload: TrustUpdate,
    services: ServiceFactory = Depends(deps.get_services),
):
    return deps.unwrap(services.trust().add_or_update_trust(student, reviewer, payload.weight))


@router.delete("/trusted/{reviewer}", status_code=status.HTTP_204_NO_CONTENT)
def remove_trusted_reviewer(
    student: str,
    reviewer: str,
    services: ServiceFactory = Depends(deps.get_services),
):
    if not deps.unwrap(services.trust().remove_trust(student, reviewer)):
        deps.unwrap(ServiceResult.not_found("TrustedReviewer", f"{student}->{reviewer}"))


@router.get("/trusted", response_model=TrustedReviewersResponse)
def list_trusted(student: str, services: ServiceFactory = Depends(deps.get_services)):
    trusted = deps.unwrap(services.trust().list_trusted(student))
    return TrustedReviewersResponse(student_username=student, trusted=trusted)


@router.get("/updates", response_model=UpdatedReviewersResponse)
def list_updates(student: str, services: ServiceFactory = Depends(deps.get_services)):
    """Trusted reviewers who posted something the student has not seen."""
    updated = deps.unwrap(services.trust().list_updated(student))
    return UpdatedReviewersResponse(student_username=student, reviewers=sorted(updated))


@router.post("/trusted/{reviewer}/seen", status_code=status.HTTP_204_NO_CONTENT)
def mark_seen(
    student: str,
    reviewer: str,
    services: ServiceFactory = Depends(deps.get_services),
):
    deps.unwrap(services.trust().clear_update_flag(student, reviewer))
