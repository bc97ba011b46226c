"""
Wellness Service

Write-side entry points callable without HTTP: source submissions that
go through the escalation engine, and the follow-up staff operations
(resolving panics, triaging reports, case management, parent
notifications, user directory maintenance).
"""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar
from uuid import UUID

from edu360.config.logging_config import get_logger
from edu360.domain.enums.wellness import (
    AlertPriority,
    AlertSourceType,
    CaseStatus,
    Mood,
    ReportStatus,
    ReportType,
    UserRole,
)
from edu360.domain.models import (
    AnonymousReport,
    CounselorNote,
    DerivedAlert,
    GeoPoint,
    MoodCheckin,
    PanicAlert,
    ParentNotification,
    User,
    WellnessCase,
)
from edu360.domain.models.base import utcnow
from edu360.infrastructure.metrics.prometheus_metrics import (
    track_escalation_failure,
    track_submission,
)
from edu360.infrastructure.monitoring.sentry_integration import capture_escalation_failure
from edu360.infrastructure.store.base import EventStore
from edu360.infrastructure.store.user_directory import UserDirectory
from edu360.services.escalation.escalation_engine import (
    EscalationEngine,
    EscalationError,
)
from edu360.services.notifications import channels
from edu360.services.notifications.broadcaster import (
    Handler,
    MessageType,
    NotificationBroadcaster,
    Subscription,
)

logger = get_logger(__name__)

RecordT = TypeVar("RecordT")


class WellnessServiceError(Exception):
    """Base exception for rejected wellness operations."""


class ConflictError(WellnessServiceError):
    """The operation conflicts with existing data."""


class InvalidReferenceError(WellnessServiceError):
    """A referenced record exists but has the wrong kind or state."""


@dataclass
class SubmissionResult(Generic[RecordT]):
    """
    Outcome of a source submission.

    Attributes:
        record: The persisted source record
        alerts: Derived alerts that were written
        escalation_failed: True when derived writes failed
    """

    record: RecordT
    alerts: list[DerivedAlert] = field(default_factory=list)
    escalation_failed: bool = False

    def to_dict(self) -> dict:
        return {
            "record": self.record.to_dict(),
            "alerts": [alert.to_dict() for alert in self.alerts],
            "escalation_failed": self.escalation_failed,
        }


class WellnessService:
    """
    Application service over the store, engine and broadcaster.

    Usage:
        service = WellnessService(store, broadcaster, engine)
        result = await service.create_panic_alert(student_id)
    """

    def __init__(
        self,
        store: EventStore,
        broadcaster: NotificationBroadcaster,
        engine: EscalationEngine,
        directory: Optional[UserDirectory] = None,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._engine = engine
        self._directory = directory or UserDirectory(store)

    # =========================================================================
    # SOURCE SUBMISSIONS
    # =========================================================================

    async def create_mood_checkin(
        self,
        user_id: UUID,
        mood: Mood,
        energy_level: int,
        journal_entry: Optional[str] = None,
        is_private: bool = False,
    ) -> SubmissionResult[MoodCheckin]:
        """
        Persist a mood check-in, then escalate it.

        The check-in is stored before classification; the verdict is
        attached afterwards.

        Raises:
            ValueError: On invalid energy level (nothing is written)
            StoreUnavailableError: If the check-in cannot be stored
        """
        checkin = MoodCheckin(
            user_id=user_id,
            mood=mood,
            energy_level=energy_level,
            journal_entry=journal_entry,
            is_private=is_private,
        )
        await self._store.create(checkin)
        track_submission(AlertSourceType.MOOD.value)
        logger.info("Mood check-in created", checkin_id=str(checkin.id), mood=mood.value)

        try:
            alerts = await self._engine.on_mood_checkin_created(checkin)
        except EscalationError as e:
            self._report_escalation_failure(e)
            return SubmissionResult(checkin, e.alerts, escalation_failed=True)
        return SubmissionResult(checkin, alerts)

    async def create_anonymous_report(
        self,
        report_type: ReportType,
        description: str,
        is_emergency: bool = False,
        location: Optional[str] = None,
    ) -> SubmissionResult[AnonymousReport]:
        """Persist an anonymous report, then escalate it."""
        report = AnonymousReport(
            report_type=report_type,
            description=description,
            is_emergency=is_emergency,
            location=location,
        )
        await self._store.create(report)
        track_submission(AlertSourceType.REPORT.value)
        logger.info(
            "Anonymous report created",
            report_id=str(report.id),
            report_type=report_type.value,
            is_emergency=is_emergency,
        )

        try:
            alerts = await self._engine.on_anonymous_report_created(report)
        except EscalationError as e:
            self._report_escalation_failure(e)
            return SubmissionResult(report, e.alerts, escalation_failed=True)
        return SubmissionResult(report, alerts)

    async def create_panic_alert(
        self,
        user_id: UUID,
        location: Optional[GeoPoint] = None,
    ) -> SubmissionResult[PanicAlert]:
        """Persist a panic alert, then escalate it."""
        panic = PanicAlert(user_id=user_id, location=location)
        await self._store.create(panic)
        track_submission(AlertSourceType.PANIC.value)
        logger.warning("Panic alert created", panic_alert_id=str(panic.id), user_id=str(user_id))

        try:
            alerts = await self._engine.on_panic_alert_created(panic)
        except EscalationError as e:
            self._report_escalation_failure(e)
            return SubmissionResult(panic, e.alerts, escalation_failed=True)
        return SubmissionResult(panic, alerts)

    def _report_escalation_failure(self, error: EscalationError) -> None:
        # Gaps are logged and counted, never reconciled
        track_escalation_failure(error.source_type.value)
        logger.error(
            "Escalation failed, source record kept",
            source_type=error.source_type.value,
            source_id=str(error.source_id),
            alerts_written=len(error.alerts),
            cause=str(error.__cause__),
        )
        capture_escalation_failure(error, error.source_type.value, str(error.source_id))

    def subscribe_channel(self, channel: str, on_message: Handler) -> Subscription:
        """Subscribe a handler to a realtime channel."""
        return self._broadcaster.subscribe(channel, on_message)

    # =========================================================================
    # STAFF FOLLOW-UP
    # =========================================================================

    async def resolve_panic_alert(self, panic_alert_id: UUID, resolved_by: UUID) -> PanicAlert:
        """
        Mark a panic alert resolved and publish the update.

        Raises:
            RecordNotFoundError: Unknown panic alert or resolver
            PanicAlertAlreadyResolvedError: Already resolved
        """
        await self._store.get(User, resolved_by)
        panic = await self._store.get(PanicAlert, panic_alert_id)
        panic.resolve(resolved_by)
        await self._store.save(panic)
        self._broadcaster.publish(channels.PANIC_ALERTS, panic.to_dict(), MessageType.UPDATE)
        logger.info("Panic alert resolved", panic_alert_id=str(panic.id), resolved_by=str(resolved_by))
        return panic

    async def update_report(
        self,
        report_id: UUID,
        status: Optional[ReportStatus] = None,
        assigned_counselor_id: Optional[UUID] = None,
    ) -> AnonymousReport:
        """
        Change a report's status and/or assigned counselor.

        Raises:
            RecordNotFoundError: Unknown report or counselor
            InvalidReferenceError: Assignee is not an active counselor
        """
        report = await self._store.get(AnonymousReport, report_id)
        if assigned_counselor_id is not None:
            counselor = await self._store.get(User, assigned_counselor_id)
            if not counselor.is_available_counselor:
                raise InvalidReferenceError(f"User {assigned_counselor_id} is not an active counselor")
            report.assign_counselor(counselor.id)
        if status is not None:
            report.set_status(status)
        await self._store.save(report)
        self._broadcaster.publish(channels.ANONYMOUS_REPORTS, report.to_dict(), MessageType.UPDATE)
        return report

    # =========================================================================
    # CASE MANAGEMENT
    # =========================================================================

    async def create_case(
        self,
        student_id: UUID,
        counselor_id: UUID,
        title: str,
        description: Optional[str] = None,
        priority: AlertPriority = AlertPriority.MEDIUM,
    ) -> WellnessCase:
        student = await self._store.get(User, student_id)
        counselor = await self._store.get(User, counselor_id)
        if student.role != UserRole.STUDENT:
            raise InvalidReferenceError(f"User {student_id} is not a student")
        if counselor.role != UserRole.COUNSELOR:
            raise InvalidReferenceError(f"User {counselor_id} is not a counselor")

        case = WellnessCase(
            student_id=student_id,
            counselor_id=counselor_id,
            title=title,
            description=description,
            priority=priority,
        )
        await self._store.create(case)
        logger.info("Wellness case opened", case_id=str(case.id), priority=priority.value)
        return case

    async def update_case(
        self,
        case_id: UUID,
        *,
        status: Optional[CaseStatus] = None,
        priority: Optional[AlertPriority] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> WellnessCase:
        case = await self._store.get(WellnessCase, case_id)
        if status is not None:
            case.status = status
        if priority is not None:
            case.priority = priority
        if title is not None:
            case.title = title
        if description is not None:
            case.description = description
        case.updated_at = utcnow()
        await self._store.save(case)
        return case

    async def add_case_note(
        self,
        case_id: UUID,
        counselor_id: UUID,
        note: str,
        is_private: bool = True,
    ) -> CounselorNote:
        """Append a note and stamp the case's last contact."""
        case = await self._store.get(WellnessCase, case_id)
        await self._store.get(User, counselor_id)

        counselor_note = CounselorNote(
            case_id=case.id,
            counselor_id=counselor_id,
            note=note,
            is_private=is_private,
        )
        await self._store.create(counselor_note)
        case.record_contact(counselor_note.created_at)
        await self._store.save(case)
        return counselor_note

    async def list_case_notes(self, case_id: UUID) -> list[CounselorNote]:
        await self._store.get(WellnessCase, case_id)
        return await self._store.list(CounselorNote, where=lambda n: n.case_id == case_id)

    # =========================================================================
    # PARENT NOTIFICATIONS
    # =========================================================================

    async def create_parent_notification(
        self,
        parent_id: UUID,
        student_id: UUID,
        notification_type: str,
        title: str,
        message: str,
    ) -> ParentNotification:
        """
        Notify a parent about their child and publish it on the parent channel.

        Raises:
            InvalidReferenceError: The student is not linked to the parent
        """
        student = await self._store.get(User, student_id)
        if student.parent_id != parent_id:
            raise InvalidReferenceError(f"Student {student_id} is not linked to parent {parent_id}")

        notification = ParentNotification(
            parent_id=parent_id,
            student_id=student_id,
            type=notification_type,
            title=title,
            message=message,
        )
        await self._store.create(notification)
        self._broadcaster.publish(
            channels.parent_channel(parent_id),
            notification.to_dict(),
            MessageType.INSERT,
        )
        return notification

    async def mark_notification_read(self, notification_id: UUID) -> ParentNotification:
        notification = await self._store.get(ParentNotification, notification_id)
        if not notification.read:
            notification = await self._store.update(
                ParentNotification, notification_id, {"read": True}
            )
        return notification

    # =========================================================================
    # USER DIRECTORY
    # =========================================================================

    async def register_user(
        self,
        email: str,
        first_name: str,
        last_name: str,
        role: UserRole,
        grade: Optional[str] = None,
        parent_id: Optional[UUID] = None,
    ) -> User:
        """
        Add a user to the directory.

        Raises:
            ConflictError: Email already registered
            InvalidReferenceError: parent_id does not name a parent
            ValueError: Malformed email
        """
        if await self._directory.get_by_email(email) is not None:
            raise ConflictError(f"Email already registered: {email}")
        if parent_id is not None:
            parent = await self._store.get(User, parent_id)
            if parent.role != UserRole.PARENT:
                raise InvalidReferenceError(f"User {parent_id} is not a parent")

        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            grade=grade,
            parent_id=parent_id,
        )
        await self._store.create(user)
        logger.info("User registered", user_id=str(user.id), role=role.value)
        return user

    async def deactivate_user(self, user_id: UUID) -> User:
        user = await self._store.get(User, user_id)
        if user.is_active:
            user.deactivate()
            await self._store.save(user)
            logger.info("User deactivated", user_id=str(user.id))
        return user

    async def seed_sample_data(self) -> list[User]:
        """Create a sample admin and counselor when the directory is empty."""
        if await self._store.count(User) > 0:
            return []
        users = [
            await self.register_user(
                "admin@edu360.edu", "Sample", "Admin", UserRole.ADMIN,
            ),
            await self.register_user(
                "counselor@edu360.edu", "Sample", "Counselor", UserRole.COUNSELOR,
            ),
        ]
        logger.info("Sample users seeded", count=len(users))
        return users
