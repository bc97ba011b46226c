"""
LLM Provider Abstract Interface

Defines the contract for LLM provider implementations used by the
sentiment classifier and the support chat. Services depend on this
interface only, so tests substitute fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ChatPrompt:
    """
    Prompt sent to a chat-completion model.

    Attributes:
        system: System instruction
        messages: Conversation turns as {"role", "content"} dicts
        max_tokens: Optional completion limit
        temperature: Optional sampling temperature
        json_mode: Ask the model for a single JSON object
    """

    system: str
    messages: list[dict[str, str]] = field(default_factory=list)
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    json_mode: bool = False

    def to_messages(self) -> list[dict[str, str]]:
        """Messages in chat-completion order, system first."""
        return [{"role": "system", "content": self.system}, *self.messages]


@dataclass
class LLMResponse:
    """
    Response from LLM provider.

    Attributes:
        content: Generated text response
        finish_reason: Why generation stopped
        usage: Token usage statistics
        model: Model identifier used
        provider: Provider name
        latency_ms: Response time in milliseconds
        raw_response: Original API response (for debugging)
    """

    content: str
    finish_reason: str = "stop"
    usage: dict = field(default_factory=dict)
    model: str = ""
    provider: str = ""
    latency_ms: int = 0
    raw_response: Optional[Any] = None

    @property
    def total_tokens(self) -> int:
        """Get total tokens used."""
        return self.usage.get("total_tokens", 0)

    def to_dict(self) -> dict:
        """Serialize to dictionary (excluding raw_response)."""
        return {
            "content": self.content,
            "finish_reason": self.finish_reason,
            "usage": self.usage,
            "model": self.model,
            "provider": self.provider,
            "latency_ms": self.latency_ms,
        }


class LLMProvider(ABC):
    """
    Abstract LLM provider interface.

    Required capabilities:
    - Async completion generation
    - Configuration check (callers skip the provider when unconfigured)
    - Health check
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get provider name for logging/tracking."""
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Get default model identifier."""
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: ChatPrompt,
        *,
        model: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate completion from prompt.

        Args:
            prompt: Prompt with system instruction and messages
            model: Optional model override

        Returns:
            LLMResponse with generated content

        Raises:
            LLMProviderError: On provider-specific errors
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check provider availability.

        Returns:
            True if provider is available
        """
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """
        Check if provider is properly configured.

        Returns:
            True if API key and settings are configured
        """
        pass


class LLMProviderError(Exception):
    """Base exception for LLM provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        is_retryable: bool = False,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.is_retryable = is_retryable
        self.original_error = original_error


class RateLimitError(LLMProviderError):
    """Rate limit exceeded error."""

    def __init__(
        self,
        provider: str,
        retry_after_seconds: Optional[int] = None,
    ) -> None:
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            is_retryable=True,
        )
        self.retry_after_seconds = retry_after_seconds


class ContentFilterError(LLMProviderError):
    """Content was filtered by provider's safety systems."""

    def __init__(self, provider: str, filter_reason: str = "") -> None:
        super().__init__(
            f"Content filtered by {provider}: {filter_reason}",
            provider=provider,
            is_retryable=False,
        )
        self.filter_reason = filter_reason
