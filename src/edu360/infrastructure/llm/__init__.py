"""LLM provider abstraction package."""

from edu360.infrastructure.llm.provider import (
    ChatPrompt,
    ContentFilterError,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    RateLimitError,
)
from edu360.infrastructure.llm.openai_provider import OpenAIProvider

__all__ = [
    # Base types
    "ChatPrompt",
    "LLMProvider",
    "LLMResponse",
    "LLMProviderError",
    "RateLimitError",
    "ContentFilterError",
    # Providers
    "OpenAIProvider",
]
