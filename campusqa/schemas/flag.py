"""
Moderation flag schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from campusqa.core.constants import MAX_FLAG_REASON_LENGTH
from campusqa.models.base import FlagType
from campusqa.schemas.base import BaseSchema

__all__ = [
    "FlagCreate",
    "FlagResolve",
    "FlagResponse",
    "FlagResolveResponse",
    "UnresolvedCountResponse",
]


class FlagCreate(BaseSchema):
    flag_type: FlagType
    item_id: str = Field(..., min_length=1, max_length=64)
    flagged_by: str = Field(..., min_length=1, max_length=255)
    reason: str = Field(..., min_length=1, max_length=MAX_FLAG_REASON_LENGTH)


class FlagResolve(BaseSchema):
    flag_type: FlagType
    item_id: str = Field(..., min_length=1, max_length=64)
    resolved_by: Optional[str] = Field(default=None, max_length=255)


class FlagResponse(BaseSchema):
    id: int
    flag_type: FlagType
    item_id: str
    flagged_by: str
    reason: str
    created_at: datetime
    is_resolved: bool
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None


class FlagResolveResponse(BaseSchema):
    item_id: str
    flag_type: FlagType
    resolved_now: int = Field(..., ge=0, description="Flags that changed state")
    is_resolved: bool


class UnresolvedCountResponse(BaseSchema):
    username: str
    unresolved: int = Field(..., ge=0)
