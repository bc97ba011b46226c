"""Domain models package."""

from edu360.domain.models.user import User
from edu360.domain.models.mood_checkin import (
    MoodCheckin,
    SentimentVerdict,
    VerdictAlreadyAttachedError,
)
from edu360.domain.models.anonymous_report import AnonymousReport
from edu360.domain.models.panic_alert import (
    GeoPoint,
    PanicAlert,
    PanicAlertAlreadyResolvedError,
)
from edu360.domain.models.derived_alert import DerivedAlert
from edu360.domain.models.wellness_case import CounselorNote, WellnessCase
from edu360.domain.models.notification import ParentNotification
from edu360.domain.models.chat_message import ChatMessage

__all__ = [
    # Directory
    "User",
    # Source events
    "MoodCheckin",
    "SentimentVerdict",
    "VerdictAlreadyAttachedError",
    "AnonymousReport",
    "GeoPoint",
    "PanicAlert",
    "PanicAlertAlreadyResolvedError",
    # Derived records
    "DerivedAlert",
    "ParentNotification",
    # Case management
    "WellnessCase",
    "CounselorNote",
    # AI chat
    "ChatMessage",
]
