"""
Escalation Engine

Maps each newly persisted source event to its derived records:

- Mood check-in: classify the journal entry (heuristic fallback), attach
  the verdict, and raise one alert when the verdict is flagged.
- Anonymous report: emergencies become urgent, get the first available
  counselor and one urgent alert; other reports stay pending.
- Panic alert: always exactly one urgent alert.

Every event is published on its channel (INSERT) before its alerts
(ALERT), and the INSERT goes out even when a derived write fails.
Flagged non-private check-ins and panic alerts are also fanned out to
the student's parent.
"""

from typing import Optional
from uuid import UUID

from edu360.config.logging_config import get_logger
from edu360.domain.enums.wellness import (
    AlertPriority,
    AlertSourceType,
    ReportStatus,
)
from edu360.domain.models import (
    AnonymousReport,
    DerivedAlert,
    MoodCheckin,
    PanicAlert,
    ParentNotification,
    VerdictAlreadyAttachedError,
)
from edu360.infrastructure.metrics.prometheus_metrics import (
    track_derived_alert,
    track_parent_notification,
)
from edu360.infrastructure.store.base import EventStore, StoreError
from edu360.infrastructure.store.user_directory import UserDirectory
from edu360.services.notifications import channels
from edu360.services.notifications.broadcaster import (
    MessageType,
    NotificationBroadcaster,
)
from edu360.services.sentiment.classifier import SentimentClassifier

logger = get_logger(__name__)

MOOD_ALERT_MESSAGE = "concerning mood pattern"


class EscalationError(Exception):
    """
    Derived records for a persisted source event could not be written.

    The source record itself exists; only its escalation is incomplete.
    """

    def __init__(
        self,
        source_type: AlertSourceType,
        source_id: UUID,
        alerts: Optional[list[DerivedAlert]] = None,
    ) -> None:
        super().__init__(f"Escalation of {source_type.value} {source_id} failed")
        self.source_type = source_type
        self.source_id = source_id
        self.alerts = alerts or []


class EscalationEngine:
    """
    Escalation policy over an injected store, broadcaster and classifier.

    Each handler mutates the record it is given to reflect the stored
    state (verdict, status, assignment) and returns the alerts created.

    Raises:
        EscalationError: From any handler when a derived write fails
    """

    def __init__(
        self,
        store: EventStore,
        broadcaster: NotificationBroadcaster,
        classifier: SentimentClassifier,
        directory: Optional[UserDirectory] = None,
        notify_parents: bool = True,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._classifier = classifier
        self._directory = directory or UserDirectory(store)
        self._notify_parents = notify_parents

    async def on_mood_checkin_created(self, checkin: MoodCheckin) -> list[DerivedAlert]:
        """Classify, attach the verdict and raise an alert when flagged."""
        if checkin.sentiment_verdict is not None:
            raise VerdictAlreadyAttachedError(checkin.id)

        alerts: list[DerivedAlert] = []
        try:
            if checkin.has_journal_entry:
                verdict = await self._classifier.analyze(
                    checkin.journal_entry,
                    checkin.mood,
                    checkin.energy_level,
                )
                await self._store.update(
                    MoodCheckin,
                    checkin.id,
                    {"sentiment_verdict": verdict.to_dict()},
                )
                checkin.attach_verdict(verdict)

                if verdict.flagged:
                    alert = DerivedAlert(
                        source_type=AlertSourceType.MOOD,
                        source_id=checkin.id,
                        priority=AlertPriority.from_verdict(verdict.priority),
                        message=MOOD_ALERT_MESSAGE,
                        student_id=checkin.user_id,
                    )
                    await self._record_alert(alert, alerts)
        except StoreError as e:
            raise EscalationError(AlertSourceType.MOOD, checkin.id, alerts) from e
        finally:
            self._publish(channels.MOOD_CHECKINS, checkin.to_dict(), alerts)

        if alerts and not checkin.is_private:
            await self._notify_parent(
                checkin.user_id,
                notification_type="wellness_concern",
                title="Wellness check-in",
                message=(
                    "Your child's recent check-in suggests they may be struggling. "
                    "A school counselor has been notified."
                ),
            )
        return alerts

    async def on_anonymous_report_created(self, report: AnonymousReport) -> list[DerivedAlert]:
        """Route emergencies to a counselor and raise one urgent alert."""
        alerts: list[DerivedAlert] = []
        try:
            target_status = ReportStatus.URGENT if report.is_emergency else ReportStatus.PENDING
            if report.is_emergency:
                report.set_status(target_status)
                counselor = await self._directory.find_available_counselor()
                if counselor is not None:
                    report.assign_counselor(counselor.id)
                else:
                    logger.warning("No counselor available for emergency report", report_id=str(report.id))
                await self._store.save(report)

                location = f" at {report.location}" if report.location else ""
                alert = DerivedAlert(
                    source_type=AlertSourceType.REPORT,
                    source_id=report.id,
                    priority=AlertPriority.URGENT,
                    message=f"Emergency {report.report_type.value} report{location}",
                )
                await self._record_alert(alert, alerts)
            elif report.status != target_status:
                report.set_status(target_status)
                await self._store.save(report)
        except StoreError as e:
            raise EscalationError(AlertSourceType.REPORT, report.id, alerts) from e
        finally:
            self._publish(channels.ANONYMOUS_REPORTS, report.to_dict(), alerts)

        return alerts

    async def on_panic_alert_created(self, panic: PanicAlert) -> list[DerivedAlert]:
        """Raise exactly one urgent alert, unconditionally."""
        message = f"Panic button pressed by student {panic.user_id}"
        if panic.location is not None:
            message += f" at {panic.location.describe()}"

        alerts: list[DerivedAlert] = []
        try:
            alert = DerivedAlert(
                source_type=AlertSourceType.PANIC,
                source_id=panic.id,
                priority=AlertPriority.URGENT,
                message=message,
                student_id=panic.user_id,
            )
            await self._record_alert(alert, alerts)
        except StoreError as e:
            raise EscalationError(AlertSourceType.PANIC, panic.id, alerts) from e
        finally:
            self._publish(channels.PANIC_ALERTS, panic.to_dict(), alerts)

        await self._notify_parent(
            panic.user_id,
            notification_type="panic_alert",
            title="Emergency alert",
            message=(
                "Your child pressed the emergency button. "
                "School staff have been notified and are responding."
            ),
        )
        return alerts

    async def _record_alert(self, alert: DerivedAlert, alerts: list[DerivedAlert]) -> None:
        await self._store.create(alert)
        alerts.append(alert)
        track_derived_alert(alert.source_type.value, alert.priority.value)
        logger.info(
            "Derived alert created",
            alert_id=str(alert.id),
            source_type=alert.source_type.value,
            source_id=str(alert.source_id),
            priority=alert.priority.value,
        )

    def _publish(self, channel: str, record: dict, alerts: list[DerivedAlert]) -> None:
        self._broadcaster.publish(channel, record, MessageType.INSERT)
        for alert in alerts:
            self._broadcaster.publish(channel, alert.to_dict(), MessageType.ALERT)

    async def _notify_parent(
        self,
        student_id: UUID,
        notification_type: str,
        title: str,
        message: str,
    ) -> Optional[ParentNotification]:
        """Write and publish a parent notification. Failures are only logged."""
        if not self._notify_parents:
            return None

        try:
            student = await self._directory.get(student_id)
            if student is None or student.parent_id is None:
                return None

            notification = ParentNotification(
                parent_id=student.parent_id,
                student_id=student.id,
                type=notification_type,
                title=title,
                message=message,
            )
            await self._store.create(notification)
        except StoreError as e:
            track_parent_notification(notification_type, "failed")
            logger.error(
                "Parent notification failed",
                student_id=str(student_id),
                notification_type=notification_type,
                error=str(e),
            )
            return None

        track_parent_notification(notification_type, "created")
        self._broadcaster.publish(
            channels.parent_channel(notification.parent_id),
            notification.to_dict(),
            MessageType.INSERT,
        )
        return notification
