"""
Anonymous Report Endpoints

Reports carry no author. Emergency reports are routed to a counselor
and raise an urgent alert before the response is sent.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from edu360.api.dependencies import get_dashboard_queries, get_store, get_wellness_service
from edu360.domain.enums.wellness import ReportStatus, ReportType
from edu360.domain.models import AnonymousReport
from edu360.infrastructure.store.base import EventStore
from edu360.services.dashboard.dashboard_queries import DashboardQueries
from edu360.services.wellness.wellness_service import WellnessService

router = APIRouter()


class CreateReportRequest(BaseModel):
    """Request to file an anonymous report."""

    report_type: ReportType
    description: str = Field(..., min_length=1, max_length=5000)
    is_emergency: bool = False
    location: Optional[str] = Field(default=None, max_length=255)


class UpdateReportRequest(BaseModel):
    """Staff triage of a report."""

    status: Optional[ReportStatus] = None
    assigned_counselor_id: Optional[UUID] = None


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="File an anonymous report",
)
async def create_report(
    request: CreateReportRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    result = await service.create_anonymous_report(
        report_type=request.report_type,
        description=request.description,
        is_emergency=request.is_emergency,
        location=request.location,
    )
    return result.record.to_dict()


@router.get("", summary="List anonymous reports")
async def list_reports(
    report_status: Optional[ReportStatus] = Query(default=None, alias="status"),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    return [report.to_dict() for report in await queries.reports(report_status)]


@router.get("/{report_id}", summary="Get an anonymous report")
async def get_report(
    report_id: UUID,
    store: EventStore = Depends(get_store),
) -> dict:
    report = await store.get(AnonymousReport, report_id)
    return report.to_dict()


@router.patch("/{report_id}", summary="Update report status or assignment")
async def update_report(
    report_id: UUID,
    request: UpdateReportRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    report = await service.update_report(
        report_id,
        status=request.status,
        assigned_counselor_id=request.assigned_counselor_id,
    )
    return report.to_dict()
