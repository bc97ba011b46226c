"""Chat message domain model for the AI support chat log."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from edu360.domain.models.base import iso, parse_datetime, parse_uuid, utcnow


@dataclass
class ChatMessage:
    """One side of an AI chat exchange."""

    user_id: UUID
    message: str
    id: UUID = field(default_factory=uuid4)
    is_ai_response: bool = False
    ai_context: Optional[dict] = None
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "message": self.message,
            "is_ai_response": self.is_ai_response,
            "ai_context": self.ai_context,
            "created_at": iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        return cls(
            id=parse_uuid(data["id"]),
            user_id=parse_uuid(data["user_id"]),
            message=data["message"],
            is_ai_response=data.get("is_ai_response", False),
            ai_context=data.get("ai_context"),
            created_at=parse_datetime(data["created_at"]),
        )
