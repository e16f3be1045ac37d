"""
Review endpoints: submit, update, delete history and query.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from campusqa.api import deps
from campusqa.models.base import TargetType
from campusqa.schemas.review import (
    DeleteHistoryResponse,
    ReviewCreate,
    ReviewerScorecard,
    ReviewHistoryResponse,
    ReviewResponse,
    ReviewUpdate,
)
from campusqa.services.base.service_factory import ServiceFactory
from campusqa.services.base.service_result import ServiceResult

router = APIRouter(tags=["Reviews"])


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def submit_review(
    payload: ReviewCreate,
    services: ServiceFactory = Depends(deps.get_services),
):
    result = services.reviews().submit_review(
        payload.reviewer_username,
        payload.target_type.value,
        payload.target_id,
        payload.rating,
        payload.comment,
    )
    return deps.unwrap(result)


@router.put("/reviews/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    services: ServiceFactory = Depends(deps.get_services),
):
    """Write a new version; an unchanged rating and comment returns the current one."""
    return deps.unwrap(services.reviews().update_review(review_id, payload.rating, payload.comment))


@router.delete("/reviews/{review_id}/history", response_model=DeleteHistoryResponse)
def delete_review_history(
    review_id: int,
    services: ServiceFactory = Depends(deps.get_services),
):
    result = services.reviews().delete_review_and_history(review_id)
    deleted = deps.unwrap(result)
    if not deleted:
        deps.unwrap(ServiceResult.not_found("Review", review_id))
    return DeleteHistoryResponse(deleted=True, deleted_ids=result.metadata.get("deleted_ids", []))


@router.get("/reviews/latest", response_model=ReviewResponse)
def latest_review(
    reviewer: str = Query(...),
    target_type: TargetType = Query(...),
    target_id: int = Query(...),
    services: ServiceFactory = Depends(deps.get_services),
):
    latest = deps.unwrap(services.reviews().get_latest_for(reviewer, target_type.value, target_id))
    if latest is None:
        deps.unwrap(ServiceResult.not_found("Review", f"{reviewer}:{target_type.value}:{target_id}"))
    return latest


@router.get("/reviews/history", response_model=ReviewHistoryResponse)
def review_history(
    reviewer: str = Query(...),
    target_id: int = Query(...),
    target_type: Optional[TargetType] = Query(default=None),
    services: ServiceFactory = Depends(deps.get_services),
):
    versions = deps.unwrap(services.reviews().get_history_for(
        reviewer,
        target_id,
        target_type.value if target_type else None,
    ))
    return ReviewHistoryResponse(
        reviewer_username=reviewer,
        target_id=target_id,
        versions=[ReviewResponse.model_validate(v) for v in versions],
    )


@router.get("/reviews/target/{target_type}/{target_id}", response_model=List[ReviewResponse])
def reviews_for_target(
    target_type: TargetType,
    target_id: int,
    services: ServiceFactory = Depends(deps.get_services),
):
    """Latest version from each reviewer, newest first."""
    return deps.unwrap(services.reviews().get_latest_for_target(target_type.value, target_id))


@router.get("/reviewers/{username}/scorecard", response_model=ReviewerScorecard)
def reviewer_scorecard(
    username: str,
    services: ServiceFactory = Depends(deps.get_services),
):
    return deps.unwrap(services.reviews().reviewer_scorecard(username))
