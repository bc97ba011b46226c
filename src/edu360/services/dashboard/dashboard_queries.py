"""
Dashboard Query Layer

Read-only projections computed from the store at call time. Nothing
here writes or caches.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, time, timezone
from typing import Optional
from uuid import UUID

from edu360.domain.enums.wellness import ReportStatus, Sentiment, UserRole
from edu360.domain.models import (
    AnonymousReport,
    DerivedAlert,
    MoodCheckin,
    PanicAlert,
    ParentNotification,
    User,
    WellnessCase,
)
from edu360.domain.models.base import utcnow
from edu360.infrastructure.store.base import EventStore
from edu360.infrastructure.store.user_directory import UserDirectory
from edu360.services.notifications.broadcaster import NotificationBroadcaster
from edu360.services.sentiment.classifier import SentimentClassifier
from edu360.services.wellness.wellness_service import InvalidReferenceError


@dataclass(frozen=True)
class CounselorStats:
    """Counts shown on the counselor dashboard."""

    active_cases: int
    new_reports: int
    urgent_reports: int
    unresolved_panic_alerts: int
    at_risk_students: int
    flagged_mood_ratio: float
    wellness_score: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AdminStats:
    """School-wide counts shown on the admin dashboard."""

    total_users: int
    users_by_role: dict[str, int]
    total_checkins: int
    checkins_today: int
    active_reports: int
    panic_alerts: int
    unresolved_panic_alerts: int

    def to_dict(self) -> dict:
        return asdict(self)


class DashboardQueries:
    """
    Aggregations for counselor, admin and parent dashboards.

    Usage:
        queries = DashboardQueries(store, broadcaster, classifier)
        stats = await queries.counselor_stats()
    """

    def __init__(
        self,
        store: EventStore,
        broadcaster: NotificationBroadcaster,
        classifier: SentimentClassifier,
        directory: Optional[UserDirectory] = None,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._classifier = classifier
        self._directory = directory or UserDirectory(store)

    async def counselor_stats(self) -> CounselorStats:
        cases = await self._store.list(WellnessCase, where=lambda c: c.is_active)
        reports = await self._store.list(AnonymousReport)
        unresolved_panics = await self._store.count(PanicAlert, where=lambda p: not p.resolved)
        classified = await self._store.list(
            MoodCheckin, where=lambda c: c.sentiment_verdict is not None
        )

        flagged = [c for c in classified if c.sentiment_verdict.flagged]
        non_negative = sum(
            1 for c in classified if c.sentiment_verdict.sentiment != Sentiment.NEGATIVE
        )

        return CounselorStats(
            active_cases=len(cases),
            new_reports=sum(1 for r in reports if r.status == ReportStatus.PENDING),
            urgent_reports=sum(1 for r in reports if r.status == ReportStatus.URGENT),
            unresolved_panic_alerts=unresolved_panics,
            at_risk_students=len({c.user_id for c in flagged}),
            flagged_mood_ratio=round(len(flagged) / len(classified), 4) if classified else 0.0,
            wellness_score=round(non_negative / len(classified) * 100) if classified else 0,
        )

    async def priority_alerts(self, limit: int = 50) -> list[DerivedAlert]:
        """Derived alerts, most severe first, then newest first."""
        alerts = await self._store.list(DerivedAlert)
        # list() is newest first and sort() is stable
        alerts.sort(key=lambda a: a.priority.rank, reverse=True)
        return alerts[:limit]

    async def admin_stats(self) -> AdminStats:
        users = await self._store.list(User)
        checkins = await self._store.list(MoodCheckin)
        panics = await self._store.list(PanicAlert)
        active_reports = await self._store.count(AnonymousReport, where=lambda r: r.is_open)

        by_role = {role.value: 0 for role in UserRole}
        for user in users:
            by_role[user.role.value] += 1

        midnight = datetime.combine(utcnow().date(), time.min, tzinfo=timezone.utc)

        return AdminStats(
            total_users=len(users),
            users_by_role=by_role,
            total_checkins=len(checkins),
            checkins_today=sum(1 for c in checkins if c.created_at >= midnight),
            active_reports=active_reports,
            panic_alerts=len(panics),
            unresolved_panic_alerts=sum(1 for p in panics if not p.resolved),
        )

    async def system_health(self) -> dict:
        return {
            "store": {
                "backend": self._store.backend_name,
                "reachable": await self._store.health_check(),
            },
            "classifier_mode": self._classifier.mode,
            "subscribers": self._broadcaster.channel_counts(),
        }

    async def recent_users(self, limit: int = 10) -> list[User]:
        return await self._directory.recent_users(limit)

    async def mood_checkins_for_user(self, user_id: UUID, limit: Optional[int] = None) -> list[MoodCheckin]:
        return await self._store.list(MoodCheckin, where=lambda c: c.user_id == user_id, limit=limit)

    async def flagged_checkins(self, limit: Optional[int] = None) -> list[MoodCheckin]:
        return await self._store.list(MoodCheckin, where=lambda c: c.is_flagged, limit=limit)

    async def reports(self, status: Optional[ReportStatus] = None) -> list[AnonymousReport]:
        if status is None:
            return await self._store.list(AnonymousReport)
        return await self._store.list(AnonymousReport, where=lambda r: r.status == status)

    async def panic_alerts(self, unresolved_only: bool = False) -> list[PanicAlert]:
        if unresolved_only:
            return await self._store.list(PanicAlert, where=lambda p: not p.resolved)
        return await self._store.list(PanicAlert)

    async def wellness_cases(
        self,
        counselor_id: Optional[UUID] = None,
        active_only: bool = False,
    ) -> list[WellnessCase]:
        def matches(case: WellnessCase) -> bool:
            if counselor_id is not None and case.counselor_id != counselor_id:
                return False
            return case.is_active or not active_only

        return await self._store.list(WellnessCase, where=matches)

    async def children_of(self, parent_id: UUID) -> list[User]:
        return await self._directory.children_of(parent_id)

    async def child_mood_history(
        self,
        parent_id: UUID,
        student_id: UUID,
        limit: Optional[int] = None,
    ) -> list[MoodCheckin]:
        """
        A child's check-ins as visible to their parent (private ones hidden).

        Raises:
            InvalidReferenceError: The student is not linked to the parent
        """
        student = await self._store.get(User, student_id)
        if student.parent_id != parent_id:
            raise InvalidReferenceError(f"Student {student_id} is not linked to parent {parent_id}")
        return await self._store.list(
            MoodCheckin,
            where=lambda c: c.user_id == student_id and not c.is_private,
            limit=limit,
        )

    async def parent_notifications(
        self,
        parent_id: UUID,
        unread_only: bool = False,
    ) -> list[ParentNotification]:
        return await self._store.list(
            ParentNotification,
            where=lambda n: n.parent_id == parent_id and (not unread_only or not n.read),
        )
