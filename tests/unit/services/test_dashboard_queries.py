"""
Unit Tests for Dashboard Queries

Aggregations read back what the submission flows wrote.
"""

import pytest

from edu360.domain.enums.wellness import AlertPriority, Mood, ReportType, UserRole
from edu360.services.dashboard import DashboardQueries
from edu360.services.wellness import InvalidReferenceError


@pytest.fixture
def queries(store, broadcaster, classifier, directory) -> DashboardQueries:
    return DashboardQueries(store, broadcaster, classifier, directory)


class TestCounselorDashboard:

    async def test_counselor_stats(self, service, queries, make_user) -> None:
        student = await make_user()
        await service.create_mood_checkin(student.id, Mood.VERY_SAD, 1, "alone")
        await service.create_mood_checkin(student.id, Mood.GOOD, 4, "great day")
        await service.create_anonymous_report(ReportType.OTHER, "x")
        await service.create_anonymous_report(ReportType.SAFETY, "y", is_emergency=True)
        await service.create_panic_alert(student.id)

        stats = await queries.counselor_stats()

        assert stats.new_reports == 1
        assert stats.urgent_reports == 1
        assert stats.unresolved_panic_alerts == 1
        assert stats.at_risk_students == 1
        assert stats.flagged_mood_ratio == 0.5
        assert stats.wellness_score == 50
        assert stats.active_cases == 0

    async def test_empty_stats(self, queries) -> None:
        stats = await queries.counselor_stats()

        assert stats.wellness_score == 0
        assert stats.flagged_mood_ratio == 0.0

    async def test_priority_alerts_most_severe_first(self, service, queries, make_user) -> None:
        student = await make_user()
        await service.create_panic_alert(student.id)
        await service.create_mood_checkin(student.id, Mood.SAD, 1, "tired")

        alerts = await queries.priority_alerts()

        assert [a.priority for a in alerts] == [AlertPriority.URGENT, AlertPriority.MEDIUM]

    async def test_flagged_checkins(self, service, queries, make_user) -> None:
        student = await make_user()
        flagged = await service.create_mood_checkin(student.id, Mood.VERY_SAD, 1, "alone")
        await service.create_mood_checkin(student.id, Mood.GREAT, 5, "yay")

        assert [c.id for c in await queries.flagged_checkins()] == [flagged.record.id]


class TestAdminDashboard:

    async def test_admin_stats(self, service, queries, make_user) -> None:
        student = await make_user()
        await make_user(UserRole.COUNSELOR)
        await service.create_mood_checkin(student.id, Mood.OKAY, 3)
        await service.create_anonymous_report(ReportType.OTHER, "x")
        panic = await service.create_panic_alert(student.id)
        counselor = await make_user(UserRole.COUNSELOR)
        await service.resolve_panic_alert(panic.record.id, counselor.id)

        stats = await queries.admin_stats()

        assert stats.total_users == 3
        assert stats.users_by_role["counselor"] == 2
        assert stats.total_checkins == 1
        assert stats.checkins_today == 1
        assert stats.active_reports == 1
        assert stats.panic_alerts == 1
        assert stats.unresolved_panic_alerts == 0

    async def test_system_health(self, queries, broadcaster, recorder_factory) -> None:
        broadcaster.subscribe("panic_alerts", recorder_factory())

        health = await queries.system_health()

        assert health["store"] == {"backend": "memory", "reachable": True}
        assert health["classifier_mode"] == "heuristic"
        assert health["subscribers"] == {"panic_alerts": 1}


class TestParentDashboard:

    async def test_child_history_hides_private_checkins(self, service, queries, make_user) -> None:
        parent = await make_user(UserRole.PARENT)
        child = await make_user(parent_id=parent.id)
        shared = await service.create_mood_checkin(child.id, Mood.GOOD, 4)
        await service.create_mood_checkin(child.id, Mood.SAD, 2, "secret", is_private=True)

        history = await queries.child_mood_history(parent.id, child.id)

        assert [c.id for c in history] == [shared.record.id]
        assert [c.id for c in await queries.children_of(parent.id)] == [child.id]

    async def test_other_parents_child_is_rejected(self, queries, make_user) -> None:
        parent = await make_user(UserRole.PARENT)
        stranger = await make_user()

        with pytest.raises(InvalidReferenceError):
            await queries.child_mood_history(parent.id, stranger.id)

    async def test_unread_notifications(self, service, queries, make_user) -> None:
        parent = await make_user(UserRole.PARENT)
        child = await make_user(parent_id=parent.id)
        await service.create_panic_alert(child.id)
        note = await service.create_parent_notification(parent.id, child.id, "progress", "t", "m")
        await service.mark_notification_read(note.id)

        unread = await queries.parent_notifications(parent.id, unread_only=True)

        assert [n.type for n in unread] == ["panic_alert"]
