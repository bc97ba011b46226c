"""
Unit Tests for the Wellness Service

Submission entry points, staff follow-up, case management, parent
notifications and the user directory.
"""

from uuid import uuid4

import pytest

from edu360.domain.enums.wellness import (
    AlertPriority,
    CaseStatus,
    Mood,
    ReportStatus,
    ReportType,
    UserRole,
)
from edu360.domain.models import (
    AnonymousReport,
    DerivedAlert,
    MoodCheckin,
    PanicAlert,
    PanicAlertAlreadyResolvedError,
    ParentNotification,
    User,
    WellnessCase,
)
from edu360.infrastructure.store import (
    MemoryEventStore,
    RecordNotFoundError,
    StoreUnavailableError,
    UserDirectory,
)
from edu360.services.escalation import EscalationEngine
from edu360.services.notifications import channels
from edu360.services.wellness import (
    ConflictError,
    InvalidReferenceError,
    WellnessService,
)


class TestSubmissions:

    async def test_mood_checkin_is_stored_and_escalated(self, service, store, make_user) -> None:
        student = await make_user()

        result = await service.create_mood_checkin(
            user_id=student.id,
            mood=Mood.VERY_SAD,
            energy_level=1,
            journal_entry="I feel so alone and hopeless",
        )

        assert result.escalation_failed is False
        assert len(result.alerts) == 1
        assert result.record.sentiment_verdict.flagged is True
        assert (await store.get(MoodCheckin, result.record.id)).sentiment_verdict is not None

    async def test_invalid_energy_writes_nothing(self, service, store) -> None:
        with pytest.raises(ValueError):
            await service.create_mood_checkin(user_id=uuid4(), mood=Mood.SAD, energy_level=9)

        assert await store.count(MoodCheckin) == 0

    async def test_emergency_report(self, service, make_user) -> None:
        counselor = await make_user(UserRole.COUNSELOR)

        result = await service.create_anonymous_report(
            report_type=ReportType.SAFETY,
            description="Threat in the hallway",
            is_emergency=True,
        )

        assert result.record.status == ReportStatus.URGENT
        assert result.record.assigned_counselor_id == counselor.id
        assert [a.priority for a in result.alerts] == [AlertPriority.URGENT]

    async def test_panic_alert(self, service, make_user) -> None:
        student = await make_user()

        result = await service.create_panic_alert(user_id=student.id)

        assert result.record.resolved is False
        assert len(result.alerts) == 1
        assert result.to_dict()["alerts"][0]["priority"] == "urgent"

    async def test_escalation_failure_keeps_source(
        self, broadcaster, classifier, failing_store_factory
    ) -> None:
        store = failing_store_factory()
        engine = EscalationEngine(store, broadcaster, classifier)
        service = WellnessService(store, broadcaster, engine)

        result = await service.create_panic_alert(user_id=uuid4())

        assert result.escalation_failed is True
        assert result.alerts == []
        assert await store.find(PanicAlert, result.record.id) is not None
        assert await store.count(DerivedAlert) == 0

    async def test_unstored_panic_leaves_nothing_behind(
        self, tmp_path, broadcaster, classifier, recorder_factory
    ) -> None:
        store = MemoryEventStore(snapshot_path=tmp_path / "missing" / "store.json")
        await store.initialize()
        service = WellnessService(store, broadcaster, EscalationEngine(store, broadcaster, classifier))
        recorder = recorder_factory()
        broadcaster.subscribe(channels.PANIC_ALERTS, recorder)

        with pytest.raises(StoreUnavailableError):
            await service.create_panic_alert(user_id=uuid4())

        assert await store.list(PanicAlert) == []
        assert recorder.messages == []

    async def test_subscribe_channel(self, service, recorder_factory, make_user) -> None:
        recorder = recorder_factory()
        subscription = service.subscribe_channel(channels.PANIC_ALERTS, recorder)

        await service.create_panic_alert(user_id=(await make_user()).id)
        subscription.close()
        await service.create_panic_alert(user_id=(await make_user()).id)

        assert recorder.types == ["INSERT", "ALERT"]


class TestStaffFollowUp:

    async def test_resolve_panic_alert(self, service, broadcaster, recorder_factory, make_user) -> None:
        staff = await make_user(UserRole.COUNSELOR)
        result = await service.create_panic_alert(user_id=(await make_user()).id)
        recorder = recorder_factory()
        broadcaster.subscribe(channels.PANIC_ALERTS, recorder)

        panic = await service.resolve_panic_alert(result.record.id, staff.id)

        assert panic.resolved is True
        assert panic.resolved_by == staff.id
        assert panic.resolved_at is not None
        assert recorder.types == ["UPDATE"]

    async def test_resolve_twice_conflicts(self, service, make_user) -> None:
        staff = await make_user(UserRole.ADMIN)
        result = await service.create_panic_alert(user_id=(await make_user()).id)
        await service.resolve_panic_alert(result.record.id, staff.id)

        with pytest.raises(PanicAlertAlreadyResolvedError):
            await service.resolve_panic_alert(result.record.id, staff.id)

    async def test_resolve_by_unknown_user(self, service, make_user) -> None:
        result = await service.create_panic_alert(user_id=(await make_user()).id)

        with pytest.raises(RecordNotFoundError):
            await service.resolve_panic_alert(result.record.id, uuid4())

    async def test_update_report(self, service, store, make_user) -> None:
        counselor = await make_user(UserRole.COUNSELOR)
        result = await service.create_anonymous_report(ReportType.BULLYING, "Name calling")

        report = await service.update_report(
            result.record.id,
            status=ReportStatus.CLOSED,
            assigned_counselor_id=counselor.id,
        )

        stored = await store.get(AnonymousReport, report.id)
        assert stored.status == ReportStatus.CLOSED
        assert stored.assigned_counselor_id == counselor.id

    async def test_report_assignee_must_be_active_counselor(self, service, make_user) -> None:
        teacher = await make_user(UserRole.TEACHER)
        result = await service.create_anonymous_report(ReportType.OTHER, "x")

        with pytest.raises(InvalidReferenceError):
            await service.update_report(result.record.id, assigned_counselor_id=teacher.id)


class TestCaseManagement:

    async def test_case_lifecycle(self, service, store, make_user) -> None:
        student = await make_user()
        counselor = await make_user(UserRole.COUNSELOR)

        case = await service.create_case(student.id, counselor.id, "Follow-up after panic alert")
        note = await service.add_case_note(case.id, counselor.id, "Met during lunch")
        updated = await service.update_case(case.id, status=CaseStatus.MONITORING)

        stored = await store.get(WellnessCase, case.id)
        assert stored.last_contact == note.created_at
        assert updated.status == CaseStatus.MONITORING
        assert [n.note for n in await service.list_case_notes(case.id)] == ["Met during lunch"]
        assert note.is_private is True

    async def test_case_roles_are_checked(self, service, make_user) -> None:
        student = await make_user()
        teacher = await make_user(UserRole.TEACHER)

        with pytest.raises(InvalidReferenceError):
            await service.create_case(student.id, teacher.id, "x")

    async def test_note_on_unknown_case(self, service, make_user) -> None:
        counselor = await make_user(UserRole.COUNSELOR)

        with pytest.raises(RecordNotFoundError):
            await service.add_case_note(uuid4(), counselor.id, "x")


class TestParentNotifications:

    async def test_create_and_mark_read(self, service, broadcaster, recorder_factory, make_user) -> None:
        parent = await make_user(UserRole.PARENT)
        student = await make_user(parent_id=parent.id)
        recorder = recorder_factory()
        broadcaster.subscribe(channels.parent_channel(parent.id), recorder)

        notification = await service.create_parent_notification(
            parent.id, student.id, "progress", "Weekly update", "Doing well"
        )
        read = await service.mark_notification_read(notification.id)

        assert recorder.messages[0].record["id"] == str(notification.id)
        assert read.read is True

    async def test_student_must_belong_to_parent(self, service, store, make_user) -> None:
        parent = await make_user(UserRole.PARENT)
        student = await make_user()

        with pytest.raises(InvalidReferenceError):
            await service.create_parent_notification(parent.id, student.id, "x", "x", "x")
        assert await store.count(ParentNotification) == 0


class TestUserDirectory:

    async def test_register_user(self, service, store) -> None:
        user = await service.register_user("Ana@School.edu", "Ana", "Ruiz", UserRole.STUDENT, grade="9")

        assert (await store.get(User, user.id)).grade == "9"

    async def test_duplicate_email_conflicts(self, service) -> None:
        await service.register_user("ana@school.edu", "Ana", "Ruiz", UserRole.STUDENT)

        with pytest.raises(ConflictError):
            await service.register_user("ANA@school.edu", "Ana", "Other", UserRole.TEACHER)

    async def test_parent_link_must_be_a_parent(self, service, make_user) -> None:
        teacher = await make_user(UserRole.TEACHER)

        with pytest.raises(InvalidReferenceError):
            await service.register_user(
                "kid@school.edu", "Kid", "One", UserRole.STUDENT, parent_id=teacher.id
            )

    async def test_deactivated_counselor_is_not_assigned(self, service, store, make_user) -> None:
        counselor = await make_user(UserRole.COUNSELOR)
        await service.deactivate_user(counselor.id)

        assert await UserDirectory(store).find_available_counselor() is None

    async def test_seed_only_into_empty_directory(self, service, store) -> None:
        seeded = await service.seed_sample_data()
        again = await service.seed_sample_data()

        assert {u.role for u in seeded} == {UserRole.ADMIN, UserRole.COUNSELOR}
        assert again == []
        assert await store.count(User) == 2
