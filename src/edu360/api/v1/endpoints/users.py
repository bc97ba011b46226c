"""
User Endpoints

Directory maintenance: registration, lookup and deactivation.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from edu360.api.dependencies import (
    get_dashboard_queries,
    get_store,
    get_wellness_service,
)
from edu360.domain.enums.wellness import UserRole
from edu360.domain.models import User
from edu360.infrastructure.store.base import EventStore
from edu360.services.dashboard.dashboard_queries import DashboardQueries
from edu360.services.wellness.wellness_service import WellnessService

router = APIRouter()


class RegisterUserRequest(BaseModel):
    """Request to add a user to the directory."""

    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole
    grade: Optional[str] = Field(default=None, max_length=20)
    parent_id: Optional[UUID] = None


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
async def register_user(
    request: RegisterUserRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    user = await service.register_user(
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        role=request.role,
        grade=request.grade,
        parent_id=request.parent_id,
    )
    return user.to_dict()


@router.get("/recent", summary="Most recently registered users")
async def recent_users(
    limit: int = Query(default=10, ge=1, le=100),
    queries: DashboardQueries = Depends(get_dashboard_queries),
) -> list[dict]:
    return [user.to_dict() for user in await queries.recent_users(limit)]


@router.get("/{user_id}", summary="Get a user")
async def get_user(
    user_id: UUID,
    store: EventStore = Depends(get_store),
) -> dict:
    user = await store.get(User, user_id)
    return user.to_dict()


@router.post("/{user_id}/deactivate", summary="Deactivate a user")
async def deactivate_user(
    user_id: UUID,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    """Deactivated counselors are no longer assigned emergency reports."""
    user = await service.deactivate_user(user_id)
    return user.to_dict()
