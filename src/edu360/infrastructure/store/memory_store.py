"""
In-Memory Event Store

Process-local backend. Mutations are serialized with an asyncio.Lock.
When a snapshot path is configured the whole store is written to a JSON
file after every mutation and reloaded on startup.
"""

import asyncio
import copy
import json
from pathlib import Path
from typing import Any, Optional

from edu360.config.logging_config import get_logger
from edu360.infrastructure.store.base import (
    DuplicateRecordError,
    EventStore,
    RecordNotFoundError,
    StoreUnavailableError,
)

logger = get_logger(__name__)


class MemoryEventStore(EventStore):
    """
    Dictionary-backed event store.

    Args:
        snapshot_path: Optional JSON file used to persist across restarts
    """

    def __init__(self, snapshot_path: Optional[str | Path] = None) -> None:
        self._records: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = asyncio.Lock()
        self._snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._closed = False

    @property
    def backend_name(self) -> str:
        return "memory"

    async def initialize(self) -> None:
        self._closed = False
        if self._snapshot_path and self._snapshot_path.exists():
            try:
                raw = await asyncio.to_thread(self._snapshot_path.read_text, encoding="utf-8")
                self._records = json.loads(raw)
            except (OSError, ValueError) as e:
                raise StoreUnavailableError(f"Cannot load snapshot: {e}") from e
            logger.info(
                "Event store snapshot loaded",
                path=str(self._snapshot_path),
                kinds=len(self._records),
            )

    async def close(self) -> None:
        self._closed = True

    async def health_check(self) -> bool:
        return not self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreUnavailableError("Memory event store is closed")

    async def _write_snapshot(self, records: dict[str, dict[str, dict[str, Any]]]) -> None:
        if not self._snapshot_path:
            return
        payload = json.dumps(records)
        try:
            await asyncio.to_thread(self._snapshot_path.write_text, payload, encoding="utf-8")
        except OSError as e:
            logger.error("Snapshot write failed", path=str(self._snapshot_path), error=str(e))
            raise StoreUnavailableError(f"Cannot write snapshot: {e}") from e

    async def _commit(self, kind: str, table: dict[str, dict[str, Any]]) -> None:
        # Only swap the table in once the snapshot holds it
        await self._write_snapshot({**self._records, kind: table})
        self._records[kind] = table

    async def _insert(self, kind: str, record_id: str, data: dict[str, Any]) -> None:
        async with self._lock:
            self._ensure_open()
            table = self._records.get(kind, {})
            if record_id in table:
                raise DuplicateRecordError(f"{kind} record {record_id} already exists")
            await self._commit(kind, {**table, record_id: copy.deepcopy(data)})

    async def _fetch(self, kind: str, record_id: str) -> Optional[dict[str, Any]]:
        self._ensure_open()
        data = self._records.get(kind, {}).get(record_id)
        return copy.deepcopy(data) if data is not None else None

    async def _fetch_all(self, kind: str) -> list[dict[str, Any]]:
        self._ensure_open()
        return [copy.deepcopy(data) for data in self._records.get(kind, {}).values()]

    async def _patch(self, kind: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            self._ensure_open()
            table = self._records.get(kind, {})
            if record_id not in table:
                raise RecordNotFoundError(kind, record_id)
            merged = {**table[record_id], **copy.deepcopy(patch)}
            await self._commit(kind, {**table, record_id: merged})
            return copy.deepcopy(merged)
