"""API route registration."""

from fastapi import APIRouter
from .analytics import router as analytics_router
from .student import router as student_router


def register_all_routes(api_router: APIRouter):
    """Include all route modules on the main API router."""
    api_router.include_router(analytics_router)
    api_router.include_router(student_router)
