"""
Local Sentiment Heuristic

Deterministic verdict used whenever the LLM classifier is unavailable,
times out or returns something unusable. Pure function: the same
(journal_entry, mood, energy_level) always yields the same verdict.
"""

from typing import Optional

from edu360.domain.enums.wellness import (
    Mood,
    Sentiment,
    VerdictPriority,
    VerdictSource,
)
from edu360.domain.models import SentimentVerdict

# Case-insensitive substrings that mark concerning language
CONCERNING_KEYWORDS: tuple[str, ...] = ("hurt", "alone", "hopeless")

LOW_ENERGY_THRESHOLD = 2
HEURISTIC_CONFIDENCE = 0.6

LOW_MOOD_RECOMMENDATIONS = ("Consider speaking with a counselor", "Practice self-care")
POSITIVE_RECOMMENDATIONS = ("Keep up the positive attitude",)


def matched_keywords(journal_entry: Optional[str]) -> tuple[str, ...]:
    """Concerning keywords present in the entry, in denylist order."""
    text = (journal_entry or "").lower()
    return tuple(keyword for keyword in CONCERNING_KEYWORDS if keyword in text)


def sentiment_for_mood(mood: Mood) -> Sentiment:
    if mood.is_low:
        return Sentiment.NEGATIVE
    if mood == Mood.OKAY:
        return Sentiment.NEUTRAL
    return Sentiment.POSITIVE


def fallback_verdict(
    journal_entry: Optional[str],
    mood: Mood,
    energy_level: int,
) -> SentimentVerdict:
    """
    Build the heuristic verdict.

    Flagged iff the mood is low and either energy is at most 2 or the
    entry contains a concerning keyword. Priority is high when the
    keyword rule fired, otherwise medium.

    Args:
        journal_entry: Free text, may be empty
        mood: Self-reported mood
        energy_level: Self-reported energy (1-5)

    Returns:
        SentimentVerdict with source=heuristic
    """
    keywords = matched_keywords(journal_entry)
    low_mood = mood.is_low
    low_energy = energy_level <= LOW_ENERGY_THRESHOLD

    return SentimentVerdict(
        sentiment=sentiment_for_mood(mood),
        confidence=HEURISTIC_CONFIDENCE,
        flagged=low_mood and (low_energy or bool(keywords)),
        concerns=("concerning language detected",) if keywords else (),
        priority=VerdictPriority.HIGH if low_mood and keywords else VerdictPriority.MEDIUM,
        keywords=keywords,
        recommendations=LOW_MOOD_RECOMMENDATIONS if low_mood else POSITIVE_RECOMMENDATIONS,
        source=VerdictSource.HEURISTIC,
    )
