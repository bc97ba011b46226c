"""
AI Support Chat

Supportive chat replies for students. Without an API key the service
answers with a fixed supportive reply; when the provider fails it
answers with a crisis-line fallback. Either way the reply carries
keyword-based suggestions and resources.
"""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from edu360.config.logging_config import get_logger
from edu360.domain.models import ChatMessage
from edu360.infrastructure.llm.provider import (
    ChatPrompt,
    LLMProvider,
    LLMProviderError,
)
from edu360.infrastructure.store.base import EventStore, StoreError
from edu360.services.chat.resources import (
    CRISIS_TEXT_LINE,
    SupportResource,
    resources_for,
    suggestions_for,
)

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are a compassionate AI wellness companion for students. Your role is to:
- Provide supportive, non-judgmental responses
- Encourage healthy coping strategies
- Recognize when professional help is needed
- Never provide medical advice or therapy
- Always prioritize student safety
- Suggest appropriate resources when helpful

If a student mentions self-harm, suicidal thoughts, or immediate danger, always recommend contacting:
- Crisis Text Line: Text HOME to 741741
- National Suicide Prevention Lifeline: 988
- Emergency services: 911
- School counselor

Keep responses warm, age-appropriate, and hopeful."""

MOCK_REPLY = (
    "Thanks for sharing. I'm here to listen and support you. "
    "Would you like to talk more about what's on your mind today?"
)

FALLBACK_REPLY = (
    "I'm sorry, I'm having trouble connecting right now. If this is urgent, "
    "please reach out to a counselor or call the crisis hotline at 988."
)

CONTEXT_WINDOW = 4


@dataclass(frozen=True)
class ChatTurn:
    """A previous message supplied as conversation context."""

    message: str
    is_ai: bool = False

    def to_message(self) -> dict[str, str]:
        return {"role": "assistant" if self.is_ai else "user", "content": self.message}


@dataclass
class ChatReply:
    """Reply returned to the student."""

    message: str
    suggestions: list[str] = field(default_factory=list)
    resources: list[SupportResource] = field(default_factory=list)
    source: str = "llm"  # llm, mock, fallback

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "suggestions": self.suggestions,
            "resources": [resource.to_dict() for resource in self.resources],
        }


class ChatService:
    """
    Student support chat.

    Usage:
        chat = ChatService(provider, store)
        reply = await chat.respond("I feel anxious", user_id=student_id)
    """

    def __init__(
        self,
        provider: Optional[LLMProvider],
        store: Optional[EventStore] = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> None:
        self._provider = provider
        self._store = store
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def respond(
        self,
        message: str,
        context: Optional[list[ChatTurn]] = None,
        user_id: Optional[UUID] = None,
    ) -> ChatReply:
        """
        Reply to a student message.

        Args:
            message: The student's message
            context: Earlier turns; only the last few are sent
            user_id: When given, both sides are saved to the chat log

        Returns:
            ChatReply, never raises for provider failures
        """
        suggestions = suggestions_for(message)
        resources = resources_for(message)

        if self._provider is None or not self._provider.is_configured():
            reply = ChatReply(MOCK_REPLY, suggestions, resources, source="mock")
        else:
            prompt = ChatPrompt(
                system=SYSTEM_PROMPT,
                messages=[
                    *(turn.to_message() for turn in (context or [])[-CONTEXT_WINDOW:]),
                    {"role": "user", "content": message},
                ],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
            try:
                response = await self._provider.generate(prompt)
                reply = ChatReply(response.content, suggestions, resources)
            except LLMProviderError as e:
                logger.error("Chat provider failed, sending fallback reply", error=str(e))
                reply = ChatReply(
                    FALLBACK_REPLY,
                    suggestions,
                    [CRISIS_TEXT_LINE],
                    source="fallback",
                )

        if user_id is not None:
            await self._log_exchange(user_id, message, reply)
        return reply

    async def _log_exchange(self, user_id: UUID, message: str, reply: ChatReply) -> None:
        if self._store is None:
            return
        try:
            await self._store.create(ChatMessage(user_id=user_id, message=message))
            await self._store.create(
                ChatMessage(
                    user_id=user_id,
                    message=reply.message,
                    is_ai_response=True,
                    ai_context={"source": reply.source, "suggestions": reply.suggestions},
                )
            )
        except StoreError as e:
            # The reply still goes out; the log is best effort
            logger.warning("Chat log write failed", user_id=str(user_id), error=str(e))

    async def history(self, user_id: UUID, limit: int = 50) -> list[ChatMessage]:
        """A user's chat log, oldest first."""
        if self._store is None:
            return []
        messages = await self._store.list(ChatMessage, where=lambda m: m.user_id == user_id)
        return list(reversed(messages[:limit]))
