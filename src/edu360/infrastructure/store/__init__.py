"""
Event store backends and the store factory.
"""

from edu360.config.settings import Settings
from edu360.infrastructure.database.connection import DatabaseManager
from edu360.infrastructure.store.base import (
    DuplicateRecordError,
    EventStore,
    RecordNotFoundError,
    StoreError,
    StoreUnavailableError,
    entity_kind,
)
from edu360.infrastructure.store.memory_store import MemoryEventStore
from edu360.infrastructure.store.sql_store import SqlEventStore
from edu360.infrastructure.store.user_directory import UserDirectory


def create_event_store(settings: Settings) -> EventStore:
    """
    Build the configured event store backend (not yet initialized).

    Args:
        settings: Application settings

    Returns:
        EventStore instance
    """
    if settings.store_backend == "sql":
        db = DatabaseManager(settings.database, echo=settings.debug)
        return SqlEventStore(db, create_tables=not settings.is_production())
    return MemoryEventStore(snapshot_path=settings.snapshot_path)


__all__ = [
    "DuplicateRecordError",
    "EventStore",
    "MemoryEventStore",
    "RecordNotFoundError",
    "SqlEventStore",
    "StoreError",
    "StoreUnavailableError",
    "UserDirectory",
    "create_event_store",
    "entity_kind",
]
