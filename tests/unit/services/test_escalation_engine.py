"""
Unit Tests for the Escalation Engine

Drives each handler with fabricated records, an in-memory store and a
heuristic classifier; no HTTP involved.
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from edu360.domain.enums.wellness import (
    AlertPriority,
    AlertSourceType,
    Mood,
    ReportStatus,
    ReportType,
    UserRole,
)
from edu360.domain.models import (
    AnonymousReport,
    DerivedAlert,
    GeoPoint,
    MoodCheckin,
    PanicAlert,
    ParentNotification,
    VerdictAlreadyAttachedError,
)
from edu360.domain.models.base import utcnow
from edu360.services.escalation import MOOD_ALERT_MESSAGE, EscalationEngine, EscalationError
from edu360.services.notifications import channels
from edu360.services.sentiment.heuristics import fallback_verdict


class TestMoodCheckinEscalation:
    """Mood check-ins are flagged by the verdict, never by the engine."""

    async def test_flagged_checkin_raises_one_alert(self, store, engine, make_user) -> None:
        student = await make_user()
        checkin = MoodCheckin(
            user_id=student.id,
            mood=Mood.VERY_SAD,
            energy_level=1,
            journal_entry="I feel so alone and hopeless",
        )
        await store.create(checkin)

        alerts = await engine.on_mood_checkin_created(checkin)

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.source_type == AlertSourceType.MOOD
        assert alert.source_id == checkin.id
        assert alert.priority == AlertPriority.HIGH
        assert alert.message == MOOD_ALERT_MESSAGE
        assert alert.student_id == student.id

        stored = await store.get(MoodCheckin, checkin.id)
        assert stored.sentiment_verdict.flagged is True
        assert await store.count(DerivedAlert) == 1

    async def test_unflagged_checkin_raises_nothing(self, store, engine, make_user) -> None:
        checkin = MoodCheckin(
            user_id=(await make_user()).id,
            mood=Mood.GOOD,
            energy_level=4,
            journal_entry="great day",
        )
        await store.create(checkin)

        alerts = await engine.on_mood_checkin_created(checkin)

        assert alerts == []
        stored = await store.get(MoodCheckin, checkin.id)
        assert stored.sentiment_verdict.flagged is False
        assert await store.count(DerivedAlert) == 0

    async def test_checkin_without_journal_is_not_classified(self, store, engine, make_user) -> None:
        checkin = MoodCheckin(user_id=(await make_user()).id, mood=Mood.VERY_SAD, energy_level=1)
        await store.create(checkin)

        alerts = await engine.on_mood_checkin_created(checkin)

        assert alerts == []
        assert (await store.get(MoodCheckin, checkin.id)).sentiment_verdict is None

    async def test_alert_count_matches_verdict(self, store, engine, make_user) -> None:
        """Exactly one alert when flagged, zero otherwise."""
        student = await make_user()
        cases = [
            (Mood.VERY_SAD, 1, "alone"),
            (Mood.SAD, 4, "fine"),
            (Mood.SAD, 2, "tired"),
            (Mood.GREAT, 1, "hopeless about maths"),
        ]
        for mood, energy, entry in cases:
            checkin = MoodCheckin(user_id=student.id, mood=mood, energy_level=energy, journal_entry=entry)
            await store.create(checkin)

            alerts = await engine.on_mood_checkin_created(checkin)

            expected = 1 if fallback_verdict(entry, mood, energy).flagged else 0
            assert len(alerts) == expected
            stored = await store.list(DerivedAlert, where=lambda a: a.source_id == checkin.id)
            assert len(stored) == expected

    async def test_verdict_is_write_once(self, store, engine, make_user) -> None:
        checkin = MoodCheckin(
            user_id=(await make_user()).id,
            mood=Mood.SAD,
            energy_level=3,
            journal_entry="ok",
        )
        await store.create(checkin)
        await engine.on_mood_checkin_created(checkin)

        with pytest.raises(VerdictAlreadyAttachedError):
            await engine.on_mood_checkin_created(checkin)

    async def test_insert_published_before_alert(
        self, store, broadcaster, engine, recorder_factory, make_user
    ) -> None:
        recorder = recorder_factory()
        broadcaster.subscribe(channels.MOOD_CHECKINS, recorder)
        checkin = MoodCheckin(
            user_id=(await make_user()).id,
            mood=Mood.VERY_SAD,
            energy_level=1,
            journal_entry="alone",
        )
        await store.create(checkin)

        await engine.on_mood_checkin_created(checkin)

        assert recorder.types == ["INSERT", "ALERT"]
        assert recorder.messages[0].record["id"] == str(checkin.id)
        assert recorder.messages[0].record["sentiment_verdict"]["flagged"] is True
        assert recorder.messages[1].record["source_id"] == str(checkin.id)


class TestAnonymousReportEscalation:

    async def test_emergency_report_is_urgent_and_assigned(self, store, engine, make_user) -> None:
        counselor = await make_user(UserRole.COUNSELOR)
        report = AnonymousReport(
            report_type=ReportType.SAFETY,
            description="Someone brought a knife",
            is_emergency=True,
        )
        await store.create(report)

        alerts = await engine.on_anonymous_report_created(report)

        stored = await store.get(AnonymousReport, report.id)
        assert stored.status == ReportStatus.URGENT
        assert stored.assigned_counselor_id == counselor.id
        assert len(alerts) == 1
        assert alerts[0].priority == AlertPriority.URGENT
        assert alerts[0].source_type == AlertSourceType.REPORT
        assert alerts[0].message == "Emergency safety report"

    async def test_alert_message_includes_location(self, store, engine) -> None:
        report = AnonymousReport(
            report_type=ReportType.BULLYING,
            description="Fight",
            is_emergency=True,
            location="Gym",
        )
        await store.create(report)

        alerts = await engine.on_anonymous_report_created(report)

        assert alerts[0].message == "Emergency bullying report at Gym"

    async def test_emergency_without_counselor_still_escalates(self, store, engine) -> None:
        report = AnonymousReport(report_type=ReportType.SAFETY, description="x", is_emergency=True)
        await store.create(report)

        alerts = await engine.on_anonymous_report_created(report)

        stored = await store.get(AnonymousReport, report.id)
        assert stored.status == ReportStatus.URGENT
        assert stored.assigned_counselor_id is None
        assert len(alerts) == 1

    async def test_earliest_active_counselor_is_chosen(self, store, engine, make_user) -> None:
        now = utcnow()
        await make_user(UserRole.COUNSELOR, created_at=now - timedelta(days=3), is_active=False)
        earliest = await make_user(UserRole.COUNSELOR, created_at=now - timedelta(days=2))
        await make_user(UserRole.COUNSELOR, created_at=now - timedelta(days=1))
        await make_user(UserRole.TEACHER, created_at=now - timedelta(days=5))
        report = AnonymousReport(report_type=ReportType.SAFETY, description="x", is_emergency=True)
        await store.create(report)

        await engine.on_anonymous_report_created(report)

        assert (await store.get(AnonymousReport, report.id)).assigned_counselor_id == earliest.id

    async def test_non_emergency_stays_pending(self, store, engine, make_user) -> None:
        await make_user(UserRole.COUNSELOR)
        report = AnonymousReport(report_type=ReportType.OTHER, description="Broken locker")
        await store.create(report)

        alerts = await engine.on_anonymous_report_created(report)

        stored = await store.get(AnonymousReport, report.id)
        assert alerts == []
        assert stored.status == ReportStatus.PENDING
        assert stored.assigned_counselor_id is None


class TestPanicAlertEscalation:

    async def test_panic_always_raises_one_urgent_alert(self, store, engine, make_user) -> None:
        panic = PanicAlert(user_id=(await make_user()).id)
        await store.create(panic)

        alerts = await engine.on_panic_alert_created(panic)

        assert len(alerts) == 1
        assert alerts[0].source_type == AlertSourceType.PANIC
        assert alerts[0].priority == AlertPriority.URGENT
        assert alerts[0].message == f"Panic button pressed by student {panic.user_id}"

    async def test_panic_message_includes_location(self, store, engine, make_user) -> None:
        panic = PanicAlert(
            user_id=(await make_user()).id,
            location=GeoPoint(latitude=40.0, longitude=-74.0, address="Library, 2nd floor"),
        )
        await store.create(panic)

        alerts = await engine.on_panic_alert_created(panic)

        assert alerts[0].message.endswith("at Library, 2nd floor")

    async def test_subscriber_receives_panic_immediately(
        self, store, broadcaster, engine, recorder_factory, make_user
    ) -> None:
        recorder = recorder_factory()
        broadcaster.subscribe(channels.PANIC_ALERTS, recorder)
        panic = PanicAlert(user_id=(await make_user()).id)
        await store.create(panic)

        alerts = await engine.on_panic_alert_created(panic)

        assert recorder.types == ["INSERT", "ALERT"]
        assert recorder.messages[1].record["id"] == str(alerts[0].id)
        assert recorder.messages[1].record["priority"] == "urgent"


class TestEscalationFailure:

    async def test_failed_alert_write_raises_after_publishing_source(
        self, broadcaster, classifier, failing_store_factory, recorder_factory
    ) -> None:
        store = failing_store_factory()
        engine = EscalationEngine(store, broadcaster, classifier)
        recorder = recorder_factory()
        broadcaster.subscribe(channels.PANIC_ALERTS, recorder)
        panic = PanicAlert(user_id=uuid4())
        await store.create(panic)

        with pytest.raises(EscalationError) as exc_info:
            await engine.on_panic_alert_created(panic)

        assert exc_info.value.source_type == AlertSourceType.PANIC
        assert exc_info.value.source_id == panic.id
        assert exc_info.value.alerts == []
        assert await store.find(PanicAlert, panic.id) is not None
        assert recorder.types == ["INSERT"]

    async def test_failed_verdict_write_leaves_checkin_unclassified(
        self, broadcaster, classifier, failing_store_factory, recorder_factory
    ) -> None:
        store = failing_store_factory(failing_kinds=(), failing_updates=("mood_checkins",))
        engine = EscalationEngine(store, broadcaster, classifier)
        recorder = recorder_factory()
        broadcaster.subscribe(channels.MOOD_CHECKINS, recorder)
        checkin = MoodCheckin(
            user_id=uuid4(), mood=Mood.VERY_SAD, energy_level=1, journal_entry="so alone"
        )
        await store.create(checkin)

        with pytest.raises(EscalationError):
            await engine.on_mood_checkin_created(checkin)

        assert checkin.sentiment_verdict is None
        assert recorder.messages[0].record["sentiment_verdict"] is None
        assert (await store.get(MoodCheckin, checkin.id)).sentiment_verdict is None
        assert await store.count(DerivedAlert) == 0


class TestParentFanOut:

    async def test_panic_notifies_linked_parent(
        self, store, broadcaster, engine, make_user, recorder_factory
    ) -> None:
        parent = await make_user(UserRole.PARENT)
        student = await make_user(parent_id=parent.id)
        recorder = recorder_factory()
        broadcaster.subscribe(channels.parent_channel(parent.id), recorder)
        panic = PanicAlert(user_id=student.id)
        await store.create(panic)

        await engine.on_panic_alert_created(panic)

        notifications = await store.list(ParentNotification)
        assert len(notifications) == 1
        assert notifications[0].parent_id == parent.id
        assert notifications[0].type == "panic_alert"
        assert recorder.types == ["INSERT"]

    async def test_private_flagged_checkin_does_not_notify(self, store, engine, make_user) -> None:
        parent = await make_user(UserRole.PARENT)
        student = await make_user(parent_id=parent.id)
        checkin = MoodCheckin(
            user_id=student.id,
            mood=Mood.VERY_SAD,
            energy_level=1,
            journal_entry="alone",
            is_private=True,
        )
        await store.create(checkin)

        alerts = await engine.on_mood_checkin_created(checkin)

        assert len(alerts) == 1
        assert await store.count(ParentNotification) == 0

    async def test_fan_out_can_be_disabled(self, store, broadcaster, classifier, make_user) -> None:
        engine = EscalationEngine(store, broadcaster, classifier, notify_parents=False)
        parent = await make_user(UserRole.PARENT)
        panic = PanicAlert(user_id=(await make_user(parent_id=parent.id)).id)
        await store.create(panic)

        await engine.on_panic_alert_created(panic)

        assert await store.count(ParentNotification) == 0

    async def test_student_without_parent_is_skipped(self, store, engine, make_user) -> None:
        panic = PanicAlert(user_id=(await make_user()).id)
        await store.create(panic)

        alerts = await engine.on_panic_alert_created(panic)

        assert len(alerts) == 1
        assert await store.count(ParentNotification) == 0

