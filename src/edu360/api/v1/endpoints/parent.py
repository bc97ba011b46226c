"""
Parent Dashboard Endpoints

Children, their non-private check-ins, and notifications.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from edu360.api.dependencies import get_dashboard_queries, get_wellness_service
from edu360.services.dashboard.dashboard_queries import DashboardQueries
from edu360.services.wellness.wellness_service import WellnessService

router = APIRouter()


class CreateNotificationRequest(BaseModel):
    """Staff-authored notification to a parent."""

    student_id: UUID
    type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)


@router.get("/{parent_id}/children", summary="A parent's children")
async def list_children(
    parent_id: UUID,
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    return [child.to_dict() for child in await queries.children_of(parent_id)]


@router.get(
    "/{parent_id}/children/{student_id}/mood-checkins",
    summary="A child's check-ins, private ones excluded",
)
async def child_mood_history(
    parent_id: UUID,
    student_id: UUID,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    checkins = await queries.child_mood_history(parent_id, student_id, limit)
    return [checkin.to_dict() for checkin in checkins]


@router.get("/{parent_id}/notifications", summary="A parent's notifications")
async def list_notifications(
    parent_id: UUID,
    unread_only: bool = Query(default=False),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    notifications = await queries.parent_notifications(parent_id, unread_only=unread_only)
    return [notification.to_dict() for notification in notifications]


@router.post(
    "/{parent_id}/notifications",
    status_code=status.HTTP_201_CREATED,
    summary="Notify a parent",
)
async def create_notification(
    parent_id: UUID,
    request: CreateNotificationRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    notification = await service.create_parent_notification(
        parent_id=parent_id,
        student_id=request.student_id,
        notification_type=request.type,
        title=request.title,
        message=request.message,
    )
    return notification.to_dict()


@router.post("/notifications/{notification_id}/read", summary="Mark a notification read")
async def mark_notification_read(
    notification_id: UUID,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    notification = await service.mark_notification_read(notification_id)
    return notification.to_dict()
