"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the campus Q&A review platform
"""
from fastapi import APIRouter

from campusqa.api.v1 import flags, reviews, trust

router = APIRouter(
    responses={
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(reviews.router)
router.include_router(trust.router)
router.include_router(flags.router)


@router.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok"}
