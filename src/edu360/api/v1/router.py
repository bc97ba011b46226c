"""
API v1 Router

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter

from edu360.api.v1.endpoints.admin import router as admin_router
from edu360.api.v1.endpoints.ai import router as ai_router
from edu360.api.v1.endpoints.counselor import router as counselor_router
from edu360.api.v1.endpoints.health import router as health_router
from edu360.api.v1.endpoints.mood_checkins import router as mood_checkins_router
from edu360.api.v1.endpoints.panic_alerts import router as panic_alerts_router
from edu360.api.v1.endpoints.parent import router as parent_router
from edu360.api.v1.endpoints.realtime import router as realtime_router
from edu360.api.v1.endpoints.reports import router as reports_router
from edu360.api.v1.endpoints.users import router as users_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["Health"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(mood_checkins_router, prefix="/mood-checkins", tags=["Mood Check-ins"])
api_router.include_router(reports_router, prefix="/anonymous-reports", tags=["Anonymous Reports"])
api_router.include_router(panic_alerts_router, prefix="/panic-alerts", tags=["Panic Alerts"])
api_router.include_router(counselor_router, prefix="/counselor", tags=["Counselor"])
api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])
api_router.include_router(parent_router, prefix="/parent", tags=["Parent"])
api_router.include_router(ai_router, prefix="/ai", tags=["AI"])
api_router.include_router(realtime_router, prefix="/realtime", tags=["Realtime"])
