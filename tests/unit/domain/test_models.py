"""
Unit Tests for Domain Models

Validation and state transitions on the core entities.
"""

from uuid import uuid4

import pytest

from edu360.domain.enums.wellness import (
    AlertPriority,
    Mood,
    ReportStatus,
    ReportType,
    Sentiment,
    UserRole,
    VerdictPriority,
)
from edu360.domain.models import (
    AnonymousReport,
    GeoPoint,
    MoodCheckin,
    PanicAlert,
    PanicAlertAlreadyResolvedError,
    SentimentVerdict,
    User,
    VerdictAlreadyAttachedError,
)


class TestMoodCheckin:

    @pytest.mark.parametrize("energy_level", [0, 6])
    def test_energy_out_of_range(self, energy_level: int) -> None:
        with pytest.raises(ValueError):
            MoodCheckin(user_id=uuid4(), mood=Mood.OKAY, energy_level=energy_level)

    def test_blank_journal_is_not_an_entry(self) -> None:
        checkin = MoodCheckin(user_id=uuid4(), mood=Mood.OKAY, energy_level=3, journal_entry="   ")

        assert checkin.has_journal_entry is False

    def test_verdict_attaches_once(self) -> None:
        checkin = MoodCheckin(user_id=uuid4(), mood=Mood.SAD, energy_level=2, journal_entry="x")
        verdict = SentimentVerdict(sentiment=Sentiment.NEGATIVE, confidence=0.6, flagged=True)

        checkin.attach_verdict(verdict)

        assert checkin.is_flagged is True
        with pytest.raises(VerdictAlreadyAttachedError):
            checkin.attach_verdict(verdict)

    def test_round_trip_through_dict(self) -> None:
        checkin = MoodCheckin(user_id=uuid4(), mood=Mood.GREAT, energy_level=5, journal_entry="yay")

        assert MoodCheckin.from_dict(checkin.to_dict()) == checkin


class TestSentimentVerdict:

    def test_confidence_bounds(self) -> None:
        with pytest.raises(ValueError):
            SentimentVerdict(sentiment=Sentiment.NEUTRAL, confidence=1.5, flagged=False)


class TestAlertPriority:

    def test_from_verdict(self) -> None:
        assert AlertPriority.from_verdict(VerdictPriority.HIGH) == AlertPriority.HIGH
        assert AlertPriority.from_verdict(None) == AlertPriority.MEDIUM

    def test_rank_orders_severity(self) -> None:
        ranked = sorted(AlertPriority, key=lambda p: p.rank)

        assert ranked == [
            AlertPriority.LOW,
            AlertPriority.MEDIUM,
            AlertPriority.HIGH,
            AlertPriority.URGENT,
        ]


class TestPanicAlert:

    def test_resolve_once(self) -> None:
        panic = PanicAlert(user_id=uuid4(), location=GeoPoint(latitude=1.0, longitude=2.0))
        staff = uuid4()

        panic.resolve(staff)

        assert panic.resolved_by == staff
        with pytest.raises(PanicAlertAlreadyResolvedError):
            panic.resolve(staff)

    def test_location_description_without_address(self) -> None:
        assert GeoPoint(latitude=1.5, longitude=-2.25).describe() == "1.50000, -2.25000"


class TestAnonymousReport:

    def test_assignment_and_status(self) -> None:
        report = AnonymousReport(report_type=ReportType.SAFETY, description="x")
        counselor = uuid4()

        report.assign_counselor(counselor)
        report.set_status(ReportStatus.CLOSED)

        assert report.assigned_counselor_id == counselor
        assert report.is_open is False


class TestUser:

    def test_invalid_email(self) -> None:
        with pytest.raises(ValueError):
            User(email="not-an-email", first_name="A", last_name="B", role=UserRole.STUDENT)

    def test_inactive_counselor_is_unavailable(self) -> None:
        counselor = User(email="c@school.edu", first_name="C", last_name="D", role=UserRole.COUNSELOR)

        counselor.deactivate()

        assert counselor.is_available_counselor is False
        assert counselor.full_name == "C D"
