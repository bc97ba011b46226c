"""Domain enums package."""

from edu360.domain.enums.wellness import (
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

__all__ = [
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
]
