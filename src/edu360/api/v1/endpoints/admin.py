"""
Admin Dashboard Endpoints
"""

from fastapi import APIRouter, Depends, Query

from edu360.api.dependencies import get_dashboard_queries
from edu360.services.dashboard.dashboard_queries import DashboardQueries

router = APIRouter()


@router.get("/stats", summary="School-wide stats")
async def admin_stats(
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> dict:
    stats = await queries.admin_stats()
    return stats.to_dict()


@router.get("/system-health", summary="Store, classifier and realtime status")
async def system_health(
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> dict:
    return await queries.system_health()


@router.get("/recent-users", summary="Most recently registered users")
async def recent_users(
    limit: int = Query(default=10, ge=1, le=100),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    return [user.to_dict() for user in await queries.recent_users(limit)]
