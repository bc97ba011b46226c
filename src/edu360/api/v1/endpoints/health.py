"""
Health Check Endpoints

Provides system health and readiness endpoints for:
- Load balancer health checks
- Kubernetes probes
- Monitoring systems
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from edu360 import __version__
from edu360.api.dependencies import get_app_settings, get_dashboard_queries
from edu360.config.settings import Settings
from edu360.services.dashboard.dashboard_queries import DashboardQueries

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Readiness check response with component health."""

    ready: bool
    components: dict


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Basic health check endpoint for load balancers",
)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Returns 200 if the application is running."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.env,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Readiness check including the event store and classifier mode",
)
async def readiness_check(
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> ReadinessResponse:
    """
    Ready when the event store is reachable.

    The classifier is never required: without an LLM the heuristic runs.
    """
    components = await queries.system_health()
    return ReadinessResponse(
        ready=components["store"]["reachable"],
        components=components,
    )


@router.get(
    "/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Kubernetes liveness probe endpoint",
)
async def liveness_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Returns 200 if the application process is alive."""
    return HealthResponse(
        status="alive",
        version=__version__,
        environment=settings.env,
    )
