"""
EDU360 Domain Layer

Core business entities and value objects.
These models represent the domain logic independent of infrastructure.
"""

from edu360.domain.enums import (
    AlertPriority,
    AlertSourceType,
    CaseStatus,
    Mood,
    ReportStatus,
    ReportType,
    Sentiment,
    UserRole,
    VerdictPriority,
    VerdictSource,
)
from edu360.domain.models import (
    AnonymousReport,
    ChatMessage,
    CounselorNote,
    DerivedAlert,
    GeoPoint,
    MoodCheckin,
    PanicAlert,
    ParentNotification,
    SentimentVerdict,
    User,
    WellnessCase,
)

__all__ = [
    # Enums
    "AlertPriority",
    "AlertSourceType",
    "CaseStatus",
    "Mood",
    "ReportStatus",
    "ReportType",
    "Sentiment",
    "UserRole",
    "VerdictPriority",
    "VerdictSource",
    # Models
    "AnonymousReport",
    "ChatMessage",
    "CounselorNote",
    "DerivedAlert",
    "GeoPoint",
    "MoodCheckin",
    "PanicAlert",
    "ParentNotification",
    "SentimentVerdict",
    "User",
    "WellnessCase",
]
