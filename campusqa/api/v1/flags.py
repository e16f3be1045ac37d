"""
Moderation flag endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from campusqa.api import deps
from campusqa.models.base import FlagType
from campusqa.schemas.flag import (
    FlagCreate,
    FlagResolve,
    FlagResolveResponse,
    FlagResponse,
    UnresolvedCountResponse,
)
from campusqa.services.base.service_factory import ServiceFactory

router = APIRouter(prefix="/flags", tags=["Moderation"])


@router.post("", response_model=FlagResponse, status_code=status.HTTP_201_CREATED)
def file_flag(payload: FlagCreate, services: ServiceFactory = Depends(deps.get_services)):
    return deps.unwrap(services.flags().file_flag(
        payload.flag_type.value,
        payload.item_id,
        payload.flagged_by,
        payload.reason,
    ))


@router.post("/resolve", response_model=FlagResolveResponse)
def resolve_flags(payload: FlagResolve, services: ServiceFactory = Depends(deps.get_services)):
    flags = services.flags()
    changed = deps.unwrap(flags.resolve(payload.item_id, payload.flag_type.value, payload.resolved_by))
    return FlagResolveResponse(
        item_id=payload.item_id,
        flag_type=payload.flag_type,
        resolved_now=changed,
        is_resolved=deps.unwrap(flags.is_resolved(payload.item_id, payload.flag_type.value)),
    )


@router.get("/unresolved", response_model=List[FlagResponse])
def list_unresolved(
    flag_type: Optional[FlagType] = Query(default=None),
    services: ServiceFactory = Depends(deps.get_services),
):
    return deps.unwrap(services.flags().list_unresolved(flag_type.value if flag_type else None))


@router.get("/item/{item_id}", response_model=List[FlagResponse])
def list_for_item(
    item_id: str,
    flag_type: Optional[FlagType] = Query(default=None),
    services: ServiceFactory = Depends(deps.get_services),
):
    return deps.unwrap(services.flags().list_by_item(item_id, flag_type.value if flag_type else None))


@router.get("/count/{username}", response_model=UnresolvedCountResponse)
def unresolved_count(username: str, services: ServiceFactory = Depends(deps.get_services)):
    """Open flags filed by the user."""
    count = deps.unwrap(services.flags().unresolved_count_for_user(username))
    return UnresolvedCountResponse(username=username, unresolved=count)
