"""
Panic Alert Endpoints

The panic button. Every press raises one urgent alert; staff resolve
alerts once the student is safe.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from edu360.api.dependencies import get_dashboard_queries, get_store, get_wellness_service
from edu360.domain.models import GeoPoint, PanicAlert
from edu360.infrastructure.store.base import EventStore
from edu360.services.dashboard.dashboard_queries import DashboardQueries
from edu360.services.wellness.wellness_service import WellnessService

router = APIRouter()


class GeoPointModel(BaseModel):
    """Device location."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(default=None, ge=0)
    address: Optional[str] = Field(default=None, max_length=255)

    def to_domain(self) -> GeoPoint:
        return GeoPoint(
            latitude=self.latitude,
            longitude=self.longitude,
            accuracy=self.accuracy,
            address=self.address,
        )


class CreatePanicAlertRequest(BaseModel):
    """Panic button press."""

    user_id: UUID
    location: Optional[GeoPointModel] = None


class ResolvePanicAlertRequest(BaseModel):
    """Staff member closing the alert."""

    resolved_by: UUID


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Press the panic button",
)
async def create_panic_alert(
    request: CreatePanicAlertRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    result = await service.create_panic_alert(
        user_id=request.user_id,
        location=request.location.to_domain() if request.location else None,
    )
    return result.record.to_dict()


@router.get("", summary="List panic alerts")
async def list_panic_alerts(
    unresolved: bool = Query(default=False, description="Only unresolved alerts"),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    return [alert.to_dict() for alert in await queries.panic_alerts(unresolved_only=unresolved)]


@router.get("/{panic_alert_id}", summary="Get a panic alert")
async def get_panic_alert(
    panic_alert_id: UUID,
    store: EventStore = Depends(get_store),
) -> dict:
    panic = await store.get(PanicAlert, panic_alert_id)
    return panic.to_dict()


@router.post("/{panic_alert_id}/resolve", summary="Resolve a panic alert")
async def resolve_panic_alert(
    panic_alert_id: UUID,
    request: ResolvePanicAlertRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    panic = await service.resolve_panic_alert(panic_alert_id, request.resolved_by)
    return panic.to_dict()
