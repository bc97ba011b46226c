"""Read-side dashboard projections."""

from edu360.services.dashboard.dashboard_queries import (
    AdminStats,
    CounselorStats,
    DashboardQueries,
)

__all__ = [
    "AdminStats",
    "CounselorStats",
    "DashboardQueries",
]
