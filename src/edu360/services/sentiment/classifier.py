"""
Sentiment Classifier

Wraps the LLM provider for journal-entry sentiment analysis. The call
runs under a bounded timeout; any provider error, timeout or unusable
response falls back to the local heuristic, so `analyze` never raises.
"""

import asyncio
import json
from typing import Any, Optional

from edu360.config.logging_config import get_logger
from edu360.domain.enums.wellness import (
    Mood,
    Sentiment,
    VerdictPriority,
    VerdictSource,
)
from edu360.domain.models import SentimentVerdict
from edu360.infrastructure.llm.provider import (
    ChatPrompt,
    LLMProvider,
    LLMProviderError,
)
from edu360.infrastructure.metrics.prometheus_metrics import track_classifier_outcome
from edu360.services.sentiment.heuristics import fallback_verdict

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a compassionate mental health expert specializing in adolescent "
    "psychology and school wellness programs."
)

ANALYSIS_TEMPLATE = """You are a mental health expert analyzing a student's mood check-in.

Student mood: {mood}
Energy level: {energy_level}/5
Journal entry: "{journal_entry}"

Analyze this entry for:
1. Overall sentiment (positive/neutral/negative)
2. Confidence level (0-1)
3. Key emotional keywords
4. Any concerns or red flags
5. Helpful recommendations
6. Whether this should be flagged for counselor attention
7. Priority level if flagged

Respond with JSON in this exact format:
{{
  "sentiment": "positive|neutral|negative",
  "confidence": 0.85,
  "keywords": ["stressed", "worried"],
  "concerns": ["mention of isolation", "academic pressure"],
  "recommendations": ["breathing exercises", "talk to counselor"],
  "flagged": true,
  "priority": "medium"
}}"""

ANALYSIS_MAX_TOKENS = 400


class InvalidVerdictError(ValueError):
    """The model response could not be turned into a verdict."""


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value)


def parse_verdict(content: str) -> SentimentVerdict:
    """
    Convert a JSON model response into a verdict.

    Missing or out-of-vocabulary fields fall back to neutral sentiment,
    confidence 0.5 and medium priority; confidence is clamped to [0, 1].

    Raises:
        InvalidVerdictError: If the content is not a JSON object or its
            flagged field is not a boolean
    """
    try:
        result = json.loads(content or "{}")
    except json.JSONDecodeError as e:
        raise InvalidVerdictError(f"Response is not JSON: {e}") from e
    if not isinstance(result, dict):
        raise InvalidVerdictError("Response is not a JSON object")

    try:
        sentiment = Sentiment(result.get("sentiment"))
    except ValueError:
        sentiment = Sentiment.NEUTRAL

    try:
        priority = VerdictPriority(result.get("priority"))
    except ValueError:
        priority = VerdictPriority.MEDIUM

    flagged = result.get("flagged", False)
    if not isinstance(flagged, bool):
        raise InvalidVerdictError(f"flagged must be a boolean, got {flagged!r}")

    raw_confidence = result.get("confidence")
    try:
        confidence = float(raw_confidence) if raw_confidence is not None else 0.5
    except (TypeError, ValueError):
        confidence = 0.5

    return SentimentVerdict(
        sentiment=sentiment,
        confidence=max(0.0, min(1.0, confidence)),
        flagged=flagged,
        concerns=_string_list(result.get("concerns")),
        priority=priority,
        keywords=_string_list(result.get("keywords")),
        recommendations=_string_list(result.get("recommendations")),
        source=VerdictSource.LLM,
    )


class SentimentClassifier:
    """
    LLM-backed sentiment classifier with heuristic fallback.

    Usage:
        classifier = SentimentClassifier(provider, timeout_seconds=5.0)
        verdict = await classifier.analyze(entry, Mood.SAD, 2)
    """

    def __init__(
        self,
        provider: Optional[LLMProvider],
        timeout_seconds: float = 5.0,
        temperature: float = 0.3,
    ) -> None:
        self._provider = provider
        self._timeout_seconds = timeout_seconds
        self._temperature = temperature

    @property
    def mode(self) -> str:
        """'llm' when a configured provider is present, else 'heuristic'."""
        if self._provider is not None and self._provider.is_configured():
            return "llm"
        return "heuristic"

    def _build_prompt(self, journal_entry: str, mood: Mood, energy_level: int) -> ChatPrompt:
        return ChatPrompt(
            system=SYSTEM_PROMPT,
            messages=[{
                "role": "user",
                "content": ANALYSIS_TEMPLATE.format(
                    mood=mood.value,
                    energy_level=energy_level,
                    journal_entry=journal_entry,
                ),
            }],
            max_tokens=ANALYSIS_MAX_TOKENS,
            temperature=self._temperature,
            json_mode=True,
        )

    async def analyze(
        self,
        journal_entry: str,
        mood: Mood,
        energy_level: int,
    ) -> SentimentVerdict:
        """
        Classify a journal entry.

        Args:
            journal_entry: Student's free text
            mood: Self-reported mood
            energy_level: Self-reported energy (1-5)

        Returns:
            SentimentVerdict from the model, or the heuristic verdict
        """
        if self.mode != "llm":
            track_classifier_outcome("unconfigured")
            return fallback_verdict(journal_entry, mood, energy_level)

        prompt = self._build_prompt(journal_entry, mood, energy_level)
        try:
            response = await asyncio.wait_for(
                self._provider.generate(prompt),
                timeout=self._timeout_seconds,
            )
            verdict = parse_verdict(response.content)
        except asyncio.TimeoutError:
            logger.warning(
                "Sentiment classifier timed out, using heuristic",
                timeout_seconds=self._timeout_seconds,
            )
            track_classifier_outcome("timeout")
            return fallback_verdict(journal_entry, mood, energy_level)
        except LLMProviderError as e:
            logger.warning(
                "Sentiment classifier failed, using heuristic",
                provider=e.provider,
                error=str(e),
            )
            track_classifier_outcome("provider_error")
            return fallback_verdict(journal_entry, mood, energy_level)
        except InvalidVerdictError as e:
            logger.warning("Unusable classifier response, using heuristic", error=str(e))
            track_classifier_outcome("invalid_response")
            return fallback_verdict(journal_entry, mood, energy_level)

        track_classifier_outcome("llm")
        return verdict
