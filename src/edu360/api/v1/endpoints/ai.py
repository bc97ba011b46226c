"""
AI Endpoints

Support chat for students and direct access to the sentiment
classifier.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from edu360.api.dependencies import get_chat_service, get_classifier
from edu360.domain.enums.wellness import Mood
from edu360.domain.models.mood_checkin import MAX_ENERGY_LEVEL, MIN_ENERGY_LEVEL
from edu360.services.chat.chat_service import ChatService, ChatTurn
from edu360.services.sentiment.classifier import SentimentClassifier

router = APIRouter()


class ContextMessage(BaseModel):
    """An earlier turn of the conversation."""

    message: str = Field(..., max_length=4000)
    is_ai: bool = False


class ChatRequest(BaseModel):
    """Student chat message."""

    message: str = Field(..., min_length=1, max_length=4000)
    context: list[ContextMessage] = Field(default_factory=list)
    user_id: Optional[UUID] = Field(default=None, description="Saves the exchange when set")


class AnalyzeMoodRequest(BaseModel):
    """Ad-hoc sentiment analysis request."""

    journal_entry: str = Field(..., min_length=1, max_length=5000)
    mood: Mood
    energy_level: int = Field(..., ge=MIN_ENERGY_LEVEL, le=MAX_ENERGY_LEVEL)


@router.post("/chat", summary="Chat with the wellness companion")
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> dict:
    """Replies always include suggestions; crisis contacts when warranted."""
    reply = await service.respond(
        request.message,
        context=[ChatTurn(turn.message, turn.is_ai) for turn in request.context],
        user_id=request.user_id,
    )
    return reply.to_dict()


@router.get("/chat/{user_id}/history", summary="A student's chat log")
async def chat_history(
    user_id: UUID,
    limit: int = Query(default=50, ge=1, le=500),
    service: ChatService = Depends(get_chat_service),
) -> list[dict]:
    """Oldest first."""
    return [message.to_dict() for message in await service.history(user_id, limit)]


@router.post("/analyze-mood", summary="Classify a journal entry")
async def analyze_mood(
    request: AnalyzeMoodRequest,
    classifier: SentimentClassifier = Depends(get_classifier),
) -> dict:
    """Nothing is stored and no alert is raised."""
    verdict = await classifier.analyze(request.journal_entry, request.mood, request.energy_level)
    return verdict.to_dict()
