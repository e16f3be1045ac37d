"""
Base schema classes and the standard error envelope.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BaseSchema",
    "ErrorDetail",
    "ErrorResponse",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    Response schemas are built straight from ORM objects.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ErrorDetail(BaseSchema):
    code: str = Field(..., description="Service error code")
    message: str = Field(..., description="Error message")
    field: Optional[str] = Field(default=None, description="Field name causing error")
    details: Optional[Dict[str, Any]] = Field(default=None)


class ErrorResponse(BaseSchema):
    """Body returned for every failed service call."""

    success: bool = Field(default=False)
    error: ErrorDetail
