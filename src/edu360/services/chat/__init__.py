"""AI support chat."""

from edu360.services.chat.chat_service import (
    FALLBACK_REPLY,
    MOCK_REPLY,
    ChatReply,
    ChatService,
    ChatTurn,
)
from edu360.services.chat.resources import (
    SupportResource,
    resources_for,
    suggestions_for,
)

__all__ = [
    "FALLBACK_REPLY",
    "MOCK_REPLY",
    "ChatReply",
    "ChatService",
    "ChatTurn",
    "SupportResource",
    "resources_for",
    "suggestions_for",
]
