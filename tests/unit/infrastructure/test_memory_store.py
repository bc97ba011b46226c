"""
Unit Tests for the In-Memory Event Store

Covers the typed create/get/list/update API shared by all backends and
the JSON snapshot.
"""

import shutil
from datetime import timedelta
from uuid import uuid4

import pytest

from edu360.domain.enums.wellness import Mood, ReportStatus, ReportType
from edu360.domain.models import AnonymousReport, MoodCheckin
from edu360.domain.models.base import utcnow
from edu360.infrastructure.store import (
    DuplicateRecordError,
    MemoryEventStore,
    RecordNotFoundError,
    StoreUnavailableError,
)


def _checkin(**kwargs) -> MoodCheckin:
    return MoodCheckin(user_id=kwargs.pop("user_id", uuid4()), mood=Mood.OKAY, energy_level=3, **kwargs)


class TestTypedApi:

    async def test_create_then_get_round_trips(self, store) -> None:
        checkin = _checkin(journal_entry="fine")
        await store.create(checkin)

        loaded = await store.get(MoodCheckin, checkin.id)

        assert loaded == checkin
        assert loaded is not checkin

    async def test_get_unknown_raises(self, store) -> None:
        with pytest.raises(RecordNotFoundError):
            await store.get(MoodCheckin, uuid4())

    async def test_find_unknown_returns_none(self, store) -> None:
        assert await store.find(MoodCheckin, uuid4()) is None

    async def test_duplicate_id_is_rejected(self, store) -> None:
        checkin = _checkin()
        await store.create(checkin)

        with pytest.raises(DuplicateRecordError):
            await store.create(checkin)

    async def test_list_orders_newest_first_with_filter_and_limit(self, store) -> None:
        now = utcnow()
        user_id = uuid4()
        old = _checkin(user_id=user_id, created_at=now - timedelta(hours=2))
        new = _checkin(user_id=user_id, created_at=now - timedelta(hours=1))
        other = _checkin(created_at=now)
        for checkin in (new, other, old):
            await store.create(checkin)

        mine = await store.list(MoodCheckin, where=lambda c: c.user_id == user_id)
        oldest = await store.list(MoodCheckin, newest_first=False, limit=1)

        assert [c.id for c in mine] == [new.id, old.id]
        assert [c.id for c in oldest] == [old.id]
        assert await store.count(MoodCheckin) == 3

    async def test_update_merges_patch(self, store) -> None:
        report = AnonymousReport(report_type=ReportType.OTHER, description="x")
        await store.create(report)

        updated = await store.update(AnonymousReport, report.id, {"status": "closed"})

        assert updated.status == ReportStatus.CLOSED
        assert updated.description == "x"

    async def test_update_cannot_change_id(self, store) -> None:
        report = AnonymousReport(report_type=ReportType.OTHER, description="x")
        await store.create(report)

        with pytest.raises(ValueError):
            await store.update(AnonymousReport, report.id, {"id": str(uuid4())})

    async def test_update_unknown_raises(self, store) -> None:
        with pytest.raises(RecordNotFoundError):
            await store.update(AnonymousReport, uuid4(), {"status": "closed"})

    async def test_stored_copy_is_isolated_from_caller(self, store) -> None:
        report = AnonymousReport(report_type=ReportType.OTHER, description="x")
        await store.create(report)

        report.set_status(ReportStatus.CLOSED)

        assert (await store.get(AnonymousReport, report.id)).status == ReportStatus.PENDING


class TestLifecycle:

    async def test_closed_store_is_unavailable(self, store) -> None:
        await store.close()

        assert await store.health_check() is False
        with pytest.raises(StoreUnavailableError):
            await store.create(_checkin())

    async def test_snapshot_survives_restart(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        first = MemoryEventStore(snapshot_path=path)
        await first.initialize()
        checkin = _checkin(journal_entry="remember me")
        await first.create(checkin)
        await first.close()

        second = MemoryEventStore(snapshot_path=path)
        await second.initialize()

        assert (await second.get(MoodCheckin, checkin.id)).journal_entry == "remember me"

    async def test_corrupt_snapshot_is_unavailable(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreUnavailableError):
            await MemoryEventStore(snapshot_path=path).initialize()

    async def test_failed_snapshot_leaves_no_record(self, tmp_path) -> None:
        store = MemoryEventStore(snapshot_path=tmp_path / "missing" / "store.json")
        await store.initialize()

        with pytest.raises(StoreUnavailableError):
            await store.create(_checkin())

        assert await store.list(MoodCheckin) == []

    async def test_failed_snapshot_keeps_previous_state(self, tmp_path) -> None:
        snapshot_dir = tmp_path / "snapshots"
        snapshot_dir.mkdir()
        store = MemoryEventStore(snapshot_path=snapshot_dir / "store.json")
        await store.initialize()
        report = AnonymousReport(report_type=ReportType.OTHER, description="x")
        await store.create(report)
        shutil.rmtree(snapshot_dir)

        with pytest.raises(StoreUnavailableError):
            await store.update(AnonymousReport, report.id, {"status": "closed"})

        assert (await store.get(AnonymousReport, report.id)).status == ReportStatus.PENDING
