"""Analytics routes: usage trends and system dashboard for the admin app."""

from fastapi import APIRouter, Depends

from app.database import db
from app.config import logger
from app.deps import get_admin_user
from app.models.user import AuthUser
from app.models.analytics import AnalyticsFilters, UsageTrends, SystemDashboard
from app.services.analytics import get_usage_trends, get_system_dashboard
from app.services.fallback import run_with_fallback, USAGE_TRENDS_FALLBACK, SYSTEM_DASHBOARD_FALLBACK
from app.utils.validation import get_analytics_filters

router = APIRouter(tags=["analytics"])


@router.get("/analytics/usage-trends", response_model=UsageTrends)
async def usage_trends(
    filters: AnalyticsFilters = Depends(get_analytics_filters),
    user: AuthUser = Depends(get_admin_user)
):
    """Active students, average accuracy and the most common struggle topics"""
    logger.info(f"Usage trends requested by {user.uid}: {filters.model_dump(exclude_none=True)}")
    return await run_with_fallback(
        "usage-trends",
        lambda: get_usage_trends(db, filters),
        USAGE_TRENDS_FALLBACK,
    )


@router.get("/analytics/system-dashboard", response_model=SystemDashboard)
async def system_dashboard(
    filters: AnalyticsFilters = Depends(get_analytics_filters),
    user: AuthUser = Depends(get_admin_user)
):
    """Questions per subject and the most asked questions"""
    logger.info(f"System dashboard requested by {user.uid}: {filters.model_dump(exclude_none=True)}")
    return await run_with_fallback(
        "system-dashboard",
        lambda: get_system_dashboard(db, filters),
        SYSTEM_DASHBOARD_FALLBACK,
    )
