"""
Mood Check-in Domain Model

A student's periodic self-report of mood and energy, optionally with a
journal entry. The sentiment verdict is the only field that changes
after creation, and it is attached at most once.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from edu360.domain.enums.wellness import (
    Mood,
    Sentiment,
    VerdictPriority,
    VerdictSource,
)
from edu360.domain.models.base import (
    iso,
    parse_datetime,
    parse_uuid,
    utcnow,
)

MIN_ENERGY_LEVEL = 1
MAX_ENERGY_LEVEL = 5


class VerdictAlreadyAttachedError(Exception):
    """Raised when a second verdict is attached to the same check-in."""

    def __init__(self, checkin_id: UUID) -> None:
        super().__init__(f"Mood check-in {checkin_id} already has a sentiment verdict")
        self.checkin_id = checkin_id


@dataclass(frozen=True)
class SentimentVerdict:
    """
    Sentiment judgment for a journal entry.

    Attributes:
        sentiment: Overall sentiment
        confidence: Classifier confidence (0.0-1.0)
        concerns: Specific concerns raised
        flagged: Whether counselor attention is warranted
        priority: Suggested priority when flagged
        keywords: Emotional keywords found
        recommendations: Suggestions shown to the student
        source: Which classifier produced the verdict
    """

    sentiment: Sentiment
    confidence: float
    flagged: bool
    concerns: tuple[str, ...] = ()
    priority: Optional[VerdictPriority] = None
    keywords: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    source: VerdictSource = VerdictSource.LLM

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be 0.0-1.0, got {self.confidence}")

    def to_dict(self) -> dict:
        return {
            "sentiment": self.sentiment.value,
            "confidence": self.confidence,
            "concerns": list(self.concerns),
            "flagged": self.flagged,
            "priority": self.priority.value if self.priority else None,
            "keywords": list(self.keywords),
            "recommendations": list(self.recommendations),
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SentimentVerdict":
        priority = data.get("priority")
        return cls(
            sentiment=Sentiment(data["sentiment"]),
            confidence=float(data["confidence"]),
            flagged=bool(data["flagged"]),
            concerns=tuple(data.get("concerns", ())),
            priority=VerdictPriority(priority) if priority else None,
            keywords=tuple(data.get("keywords", ())),
            recommendations=tuple(data.get("recommendations", ())),
            source=VerdictSource(data.get("source", VerdictSource.LLM.value)),
        )


@dataclass
class MoodCheckin:
    """
    Mood check-in record.

    Attributes:
        id: Unique check-in identifier
        user_id: Student who checked in
        mood: Self-reported mood
        energy_level: Self-reported energy (1-5)
        journal_entry: Optional free text
        is_private: Whether parents may be told about it
        sentiment_verdict: Classifier verdict, attached once
        created_at: Submission timestamp
    """

    user_id: UUID
    mood: Mood
    energy_level: int
    id: UUID = field(default_factory=uuid4)
    journal_entry: Optional[str] = None
    is_private: bool = False
    sentiment_verdict: Optional[SentimentVerdict] = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not MIN_ENERGY_LEVEL <= self.energy_level <= MAX_ENERGY_LEVEL:
            raise ValueError(
                f"Energy level must be {MIN_ENERGY_LEVEL}-{MAX_ENERGY_LEVEL}, "
                f"got {self.energy_level}"
            )

    @property
    def has_journal_entry(self) -> bool:
        return bool(self.journal_entry and self.journal_entry.strip())

    @property
    def is_flagged(self) -> bool:
        return self.sentiment_verdict is not None and self.sentiment_verdict.flagged

    def attach_verdict(self, verdict: SentimentVerdict) -> None:
        """
        Attach the classifier verdict.

        Raises:
            VerdictAlreadyAttachedError: If a verdict is already present
        """
        if self.sentiment_verdict is not None:
            raise VerdictAlreadyAttachedError(self.id)
        self.sentiment_verdict = verdict

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "mood": self.mood.value,
            "energy_level": self.energy_level,
            "journal_entry": self.journal_entry,
            "is_private": self.is_private,
            "sentiment_verdict": (
                self.sentiment_verdict.to_dict() if self.sentiment_verdict else None
            ),
            "created_at": iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MoodCheckin":
        verdict = data.get("sentiment_verdict")
        return cls(
            id=parse_uuid(data["id"]),
            user_id=parse_uuid(data["user_id"]),
            mood=Mood(data["mood"]),
            energy_level=int(data["energy_level"]),
            journal_entry=data.get("journal_entry"),
            is_private=data.get("is_private", False),
            sentiment_verdict=SentimentVerdict.from_dict(verdict) if verdict else None,
            created_at=parse_datetime(data["created_at"]),
        )
