"""
Wellness Enumerations

Standardized vocabularies shared by the domain models, the escalation
engine and the HTTP layer. Values match the wire format used by the
dashboard client.
"""

from enum import StrEnum


class UserRole(StrEnum):
    """Roles a platform user can hold."""

    STUDENT = "student"
    TEACHER = "teacher"
    PARENT = "parent"
    COUNSELOR = "counselor"
    ADMIN = "admin"


class Mood(StrEnum):
    """Self-reported mood on a mood check-in, lowest first."""

    VERY_SAD = "very-sad"
    SAD = "sad"
    OKAY = "okay"
    GOOD = "good"
    GREAT = "great"

    @property
    def is_low(self) -> bool:
        """Whether this mood counts as a low mood for escalation."""
        return self in (Mood.VERY_SAD, Mood.SAD)


class ReportType(StrEnum):
    """Categories of anonymous reports."""

    BULLYING = "bullying"
    SAFETY = "safety"
    MENTAL_HEALTH = "mental-health"
    SUBSTANCE = "substance"
    OTHER = "other"


class ReportStatus(StrEnum):
    """Lifecycle status of an anonymous report."""

    PENDING = "pending"
    URGENT = "urgent"
    CLOSED = "closed"


class Sentiment(StrEnum):
    """Sentiment judgment returned by the classifier."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class VerdictPriority(StrEnum):
    """Priority a classifier attaches to a flagged verdict."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class VerdictSource(StrEnum):
    """Which classifier produced a verdict."""

    LLM = "llm"
    HEURISTIC = "heuristic"


class AlertPriority(StrEnum):
    """
    Priority of derived alerts and wellness cases.

    Use `rank` for ordering; string comparison is alphabetical.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        """Numeric severity, higher is more severe."""
        return _PRIORITY_RANK[self]

    @classmethod
    def from_verdict(cls, priority: "VerdictPriority | None") -> "AlertPriority":
        """
        Map a verdict priority to an alert priority.

        Absent priorities default to MEDIUM.
        """
        if priority is None:
            return cls.MEDIUM
        return cls(priority.value)


_PRIORITY_RANK: dict[AlertPriority, int] = {
    AlertPriority.LOW: 1,
    AlertPriority.MEDIUM: 2,
    AlertPriority.HIGH: 3,
    AlertPriority.URGENT: 4,
}


class AlertSourceType(StrEnum):
    """Kind of source record a derived alert was created from."""

    MOOD = "mood"
    REPORT = "report"
    PANIC = "panic"


class CaseStatus(StrEnum):
    """Lifecycle status of a wellness case."""

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    MONITORING = "monitoring"
    CLOSED = "closed"
