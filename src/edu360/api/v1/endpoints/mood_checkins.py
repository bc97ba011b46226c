"""
Mood Check-in Endpoints

Students submit check-ins here; each one is classified and escalated
before the response is sent.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from edu360.api.dependencies import get_store, get_wellness_service
from edu360.domain.enums.wellness import Mood
from edu360.domain.models import MoodCheckin
from edu360.domain.models.mood_checkin import MAX_ENERGY_LEVEL, MIN_ENERGY_LEVEL
from edu360.infrastructure.store.base import EventStore
from edu360.services.wellness.wellness_service import WellnessService

router = APIRouter()


class CreateMoodCheckinRequest(BaseModel):
    """Request to submit a mood check-in."""

    user_id: UUID = Field(..., description="Student submitting the check-in")
    mood: Mood
    energy_level: int = Field(..., ge=MIN_ENERGY_LEVEL, le=MAX_ENERGY_LEVEL)
    journal_entry: Optional[str] = Field(default=None, max_length=5000)
    is_private: bool = False

    model_config = {
        "json_schema_extra": {
            "example": {
                "user_id": "123e4567-e89b-12d3-a456-426614174000",
                "mood": "sad",
                "energy_level": 2,
                "journal_entry": "Long week, feeling a bit alone.",
                "is_private": False,
            }
        }
    }


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Submit a mood check-in",
)
async def create_mood_checkin(
    request: CreateMoodCheckinRequest,
    service: WellnessService = Depends(get_wellness_service),
) -> dict:
    """
    Store the check-in, classify the journal entry and escalate.

    Returns the stored check-in with its verdict attached. A failed
    escalation does not fail the request.
    """
    result = await service.create_mood_checkin(
        user_id=request.user_id,
        mood=request.mood,
        energy_level=request.energy_level,
        journal_entry=request.journal_entry,
        is_private=request.is_private,
    )
    return result.record.to_dict()


@router.get("", summary="List mood check-ins")
async def list_mood_checkins(
    user_id: Optional[UUID] = Query(default=None),
    flagged: bool = Query(default=False, description="Only flagged check-ins"),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    store: EventStore = Depends(get_store),
) -> list[dict]:
    """Newest first."""
    def matches(checkin: MoodCheckin) -> bool:
        if user_id is not None and checkin.user_id != user_id:
            return False
        return checkin.is_flagged or not flagged

    checkins = await store.list(MoodCheckin, where=matches, limit=limit)
    return [checkin.to_dict() for checkin in checkins]


@router.get("/{checkin_id}", summary="Get a mood check-in")
async def get_mood_checkin(
    checkin_id: UUID,
    store: EventStore = Depends(get_store),
) -> dict:
    checkin = await store.get(MoodCheckin, checkin_id)
    return checkin.to_dict()
