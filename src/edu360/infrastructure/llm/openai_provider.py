"""
OpenAI LLM Provider

Implementation of the LLM provider interface for the OpenAI API.
Includes retries on transient errors and content filter detection.
"""

import time
from typing import Optional

from openai import APIError, AsyncOpenAI, RateLimitError as OpenAIRateLimitError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from edu360.config.logging_config import get_logger
from edu360.config.settings import OpenAISettings
from edu360.infrastructure.llm.provider import (
    ChatPrompt,
    ContentFilterError,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    RateLimitError,
)
from edu360.infrastructure.metrics.prometheus_metrics import track_llm_request

logger = get_logger(__name__)


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, LLMProviderError) and error.is_retryable


class OpenAIProvider(LLMProvider):
    """
    OpenAI API provider implementation.

    Usage:
        provider = OpenAIProvider(settings.openai)
        response = await provider.generate(prompt)
    """

    def __init__(self, settings: OpenAISettings) -> None:
        """
        Initialize OpenAI provider.

        Args:
            settings: OpenAI settings group
        """
        self._api_key = settings.api_key.get_secret_value()
        self._default_model = settings.model
        self._default_max_tokens = settings.max_tokens
        self._default_temperature = settings.chat_temperature
        self._client: Optional[AsyncOpenAI] = None

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return self._default_model

    def is_configured(self) -> bool:
        """Check if API key is configured."""
        return bool(self._api_key and self._api_key != "sk-CHANGE_ME")

    def _get_client(self) -> AsyncOpenAI:
        """Get or create async client."""
        if self._client is None:
            # tenacity owns retries
            self._client = AsyncOpenAI(api_key=self._api_key, max_retries=0)
        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception(_is_retryable),
        reraise=True,
    )
    async def generate(
        self,
        prompt: ChatPrompt,
        *,
        model: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate completion using the OpenAI chat completions API.

        Args:
            prompt: Chat prompt
            model: Model override

        Returns:
            LLMResponse with generated content
        """
        if not self.is_configured():
            raise LLMProviderError(
                "OpenAI API key not configured",
                provider=self.provider_name,
            )

        client = self._get_client()
        model_name = model or self._default_model
        temperature = (
            prompt.temperature if prompt.temperature is not None else self._default_temperature
        )
        request_kwargs: dict = {
            "model": model_name,
            "messages": prompt.to_messages(),
            "max_tokens": prompt.max_tokens or self._default_max_tokens,
            "temperature": temperature,
        }
        if prompt.json_mode:
            request_kwargs["response_format"] = {"type": "json_object"}

        start_time = time.time()

        try:
            response = await client.chat.completions.create(**request_kwargs)

            latency_ms = int((time.time() - start_time) * 1000)
            choice = response.choices[0]
            content = choice.message.content or ""
            finish_reason = choice.finish_reason or "stop"

            if finish_reason == "content_filter":
                raise ContentFilterError(
                    provider=self.provider_name,
                    filter_reason="Content was filtered by OpenAI safety systems",
                )

            usage = {
                "prompt_tokens": response.usage.prompt_tokens if response.usage else 0,
                "completion_tokens": response.usage.completion_tokens if response.usage else 0,
                "total_tokens": response.usage.total_tokens if response.usage else 0,
            }

            track_llm_request(self.provider_name, model_name, "success", latency_ms / 1000)
            logger.debug(
                "OpenAI completion generated",
                model=model_name,
                tokens=usage.get("total_tokens"),
                latency_ms=latency_ms,
            )

            return LLMResponse(
                content=content,
                finish_reason=finish_reason,
                usage=usage,
                model=model_name,
                provider=self.provider_name,
                latency_ms=latency_ms,
                raw_response=response,
            )

        except ContentFilterError:
            track_llm_request(self.provider_name, model_name, "filtered", time.time() - start_time)
            raise

        except OpenAIRateLimitError as e:
            track_llm_request(self.provider_name, model_name, "rate_limited", time.time() - start_time)
            logger.warning("OpenAI rate limit hit", error=str(e))
            raise RateLimitError(
                provider=self.provider_name,
                retry_after_seconds=60,
            ) from e

        except APIError as e:
            track_llm_request(self.provider_name, model_name, "error", time.time() - start_time)
            logger.error("OpenAI API error", error=str(e))
            raise LLMProviderError(
                f"OpenAI API error: {str(e)}",
                provider=self.provider_name,
                is_retryable=True,
                original_error=e,
            ) from e

        except Exception as e:
            track_llm_request(self.provider_name, model_name, "error", time.time() - start_time)
            logger.error("Unexpected OpenAI error", error=str(e))
            raise LLMProviderError(
                f"Unexpected error: {str(e)}",
                provider=self.provider_name,
                original_error=e,
            ) from e

    async def health_check(self) -> bool:
        """Check OpenAI API availability."""
        if not self.is_configured():
            return False

        try:
            client = self._get_client()
            await client.models.list()
            return True
        except Exception as e:
            logger.warning("OpenAI health check failed", error=str(e))
            return False
