"""
Counselor Dashboard Endpoints

Stats, prioritized alerts, flagged check-ins and case management.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from edu360.api.dependencies import get_dashboard_queries, get_wellness_service
from edu360.domain.enums.wellness import AlertPriority, CaseStatus
from edu360.services.dashboard.dashboard_queries import DashboardQueries
from edu360.services.wellness.wellness_service import WellnessService

router = APIRouter()


class CreateCaseRequest(BaseModel):
    """Open a wellness case."""

    student_id: UUID
    counselor_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    priority: AlertPriority = AlertPriority.MEDIUM


class UpdateCaseRequest(BaseModel):
    """Partial case update; omitted fields are unchanged."""

    status: Optional[CaseStatus] = None
    priority: Optional[AlertPriority] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)


class AddCaseNoteRequest(BaseModel):
    """Counselor note on a case."""

    counselor_id: UUID
    note: str = Field(..., min_length=1, max_length=5000)
    is_private: bool = True


@router.get("/stats", summary="Counselor dashboard stats")
async def counselor_stats(
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> dict:
    stats = await queries.counselor_stats()
    return stats.to_dict()


@router.get("/alerts", summary="Derived alerts by priority")
async def priority_alerts(
    limit: int = Query(default=50, ge=1, le=500),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    """Urgent first, newest first within a priority."""
    return [alert.to_dict() for alert in await queries.priority_alerts(limit)]


@router.get("/flagged-checkins", summary="Flagged mood check-ins")
async def flagged_checkins(
    limit: int = Query(default=50, ge=1, le=500),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    return [checkin.to_dict() for checkin in await queries.flagged_checkins(limit)]


@router.get("/cases", summary="List wellness cases")
async def list_cases(
    counselor_id: Optional[UUID] = Query(default=None),
    active_only: bool = Query(default=False),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    cases = await queries.wellness_cases(counselor_id=counselor_id, active_only=active_only)
    return [case.to_dict() for case in cases]


@router.post(
    "/cases",
    status_code=status.HTTP_201_CREATED,
    summary="Open a wellness case",
)
async def create_case(
    request: CreateCaseRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    case = await service.create_case(
        student_id=request.student_id,
        counselor_id=request.counselor_id,
        title=request.title,
        description=request.description,
        priority=request.priority,
    )
    return case.to_dict()


@router.patch("/cases/{case_id}", summary="Update a wellness case")
async def update_case(
    case_id: UUID,
    request: UpdateCaseRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    case = await service.update_case(
        case_id,
        status=request.status,
        priority=request.priority,
        title=request.title,
        description=request.description,
    )
    return case.to_dict()


@router.post(
    "/cases/{case_id}/notes",
    status_code=status.HTTP_201_CREATED,
    summary="Add a note to a case",
)
async def add_case_note(
    case_id: UUID,
    request: AddCaseNoteRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    note = await service.add_case_note(
        case_id,
        counselor_id=request.counselor_id,
        note=request.note,
        is_private=request.is_private,
    )
    return note.to_dict()


@router.get("/cases/{case_id}/notes", summary="List case notes")
async def list_case_notes(
    case_id: UUID,
    service: WellnessService = Depends(get_wellness_service),
) -> list[dict]:
    return [note.to_dict() for note in await service.list_case_notes(case_id)]
