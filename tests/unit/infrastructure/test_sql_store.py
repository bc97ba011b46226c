"""
Unit Tests for the SQL Event Store

Runs the keyed records table against SQLite through aiosqlite.
"""

from uuid import uuid4

import pytest

from edu360.config.settings import DatabaseSettings
from edu360.domain.enums.wellness import Mood, ReportStatus, ReportType, Sentiment, VerdictSource
from edu360.domain.models import AnonymousReport, MoodCheckin
from edu360.domain.models.mood_checkin import SentimentVerdict
from edu360.infrastructure.database.connection import DatabaseManager
from edu360.infrastructure.store import (
    DuplicateRecordError,
    RecordNotFoundError,
    SqlEventStore,
)


@pytest.fixture
async def sql_store(tmp_path):
    settings = DatabaseSettings(url_override=f"sqlite+aiosqlite:///{tmp_path}/edu360.db")
    store = SqlEventStore(DatabaseManager(settings), create_tables=True)
    await store.initialize()
    yield store
    await store.close()


class TestSqlEventStore:

    async def test_create_and_get(self, sql_store) -> None:
        checkin = MoodCheckin(user_id=uuid4(), mood=Mood.SAD, energy_level=2, journal_entry="meh")
        await sql_store.create(checkin)

        loaded = await sql_store.get(MoodCheckin, checkin.id)

        assert loaded.id == checkin.id
        assert loaded.journal_entry == "meh"
        assert loaded.created_at == checkin.created_at

    async def test_duplicate_id_is_rejected(self, sql_store) -> None:
        checkin = MoodCheckin(user_id=uuid4(), mood=Mood.SAD, energy_level=2)
        await sql_store.create(checkin)

        with pytest.raises(DuplicateRecordError):
            await sql_store.create(checkin)

    async def test_kinds_are_separate(self, sql_store) -> None:
        await sql_store.create(MoodCheckin(user_id=uuid4(), mood=Mood.GOOD, energy_level=4))
        await sql_store.create(AnonymousReport(report_type=ReportType.OTHER, description="x"))

        assert await sql_store.count(MoodCheckin) == 1
        assert await sql_store.count(AnonymousReport) == 1

    async def test_update_patches_payload(self, sql_store) -> None:
        checkin = MoodCheckin(user_id=uuid4(), mood=Mood.SAD, energy_level=2, journal_entry="x")
        await sql_store.create(checkin)
        verdict = SentimentVerdict(
            sentiment=Sentiment.NEGATIVE,
            confidence=0.6,
            flagged=True,
            source=VerdictSource.HEURISTIC,
        )

        await sql_store.update(MoodCheckin, checkin.id, {"sentiment_verdict": verdict.to_dict()})

        loaded = await sql_store.get(MoodCheckin, checkin.id)
        assert loaded.sentiment_verdict.flagged is True

    async def test_save_overwrites(self, sql_store) -> None:
        report = AnonymousReport(report_type=ReportType.SAFETY, description="x")
        await sql_store.create(report)
        report.set_status(ReportStatus.URGENT)

        await sql_store.save(report)

        assert (await sql_store.get(AnonymousReport, report.id)).status == ReportStatus.URGENT

    async def test_update_unknown_raises(self, sql_store) -> None:
        with pytest.raises(RecordNotFoundError):
            await sql_store.update(AnonymousReport, uuid4(), {"status": "closed"})

    async def test_health_check(self, sql_store) -> None:
        assert await sql_store.health_check() is True
        assert sql_store.backend_name == "sql"
