"""
Event Store Interface

Durable mapping from entity type to records. Backends only move plain
dictionaries around; this module owns the conversion to and from
domain models, filtering and ordering, so both backends behave
identically.

Usage:
    store = MemoryEventStore()
    await store.initialize()
    checkin = await store.create(MoodCheckin(...))
    flagged = await store.list(MoodCheckin, where=lambda c: c.is_flagged)
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, TypeVar
from uuid import UUID

from edu360.domain.models import (
    AnonymousReport,
    ChatMessage,
    CounselorNote,
    DerivedAlert,
    MoodCheckin,
    PanicAlert,
    ParentNotification,
    User,
    WellnessCase,
)

EntityT = TypeVar("EntityT")

# Record kind (table / collection name) per domain model
ENTITY_KINDS: dict[type, str] = {
    User: "users",
    MoodCheckin: "mood_checkins",
    AnonymousReport: "anonymous_reports",
    PanicAlert: "panic_alerts",
    DerivedAlert: "derived_alerts",
    WellnessCase: "wellness_cases",
    CounselorNote: "counselor_notes",
    ParentNotification: "parent_notifications",
    ChatMessage: "chat_messages",
}


def entity_kind(entity_cls: type) -> str:
    """Resolve the record kind for a domain model class."""
    try:
        return ENTITY_KINDS[entity_cls]
    except KeyError:
        raise TypeError(f"{entity_cls.__name__} is not a stored entity type") from None


class StoreError(Exception):
    """Base exception for event store failures."""


class StoreUnavailableError(StoreError):
    """The backing store cannot be reached."""


class RecordNotFoundError(StoreError):
    """No record with the requested id exists."""

    def __init__(self, kind: str, record_id: UUID | str) -> None:
        super().__init__(f"No {kind} record with id {record_id}")
        self.kind = kind
        self.record_id = str(record_id)


class DuplicateRecordError(StoreError):
    """A record with the same id already exists."""


class EventStore(ABC):
    """
    Abstract event store.

    Subclasses implement the raw dictionary operations; the typed
    create/get/list/update API is shared.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Backend identifier for health reporting."""
        pass

    async def initialize(self) -> None:
        """Prepare the backend. Called once at application startup."""

    async def close(self) -> None:
        """Release backend resources. Called at application shutdown."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True when the backend is reachable."""
        pass

    @abstractmethod
    async def _insert(self, kind: str, record_id: str, data: dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def _fetch(self, kind: str, record_id: str) -> Optional[dict[str, Any]]:
        pass

    @abstractmethod
    async def _fetch_all(self, kind: str) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def _patch(self, kind: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        """Merge patch into a stored record and return the merged record."""
        pass

    async def create(self, entity: EntityT) -> EntityT:
        """
        Persist a new record.

        Raises:
            DuplicateRecordError: If the id is already taken
            StoreUnavailableError: If the backend cannot be reached
        """
        kind = entity_kind(type(entity))
        await self._insert(kind, str(entity.id), entity.to_dict())
        return entity

    async def get(self, entity_cls: type[EntityT], record_id: UUID) -> EntityT:
        """
        Fetch one record by id.

        Raises:
            RecordNotFoundError: If no such record exists
        """
        kind = entity_kind(entity_cls)
        data = await self._fetch(kind, str(record_id))
        if data is None:
            raise RecordNotFoundError(kind, record_id)
        return entity_cls.from_dict(data)

    async def find(self, entity_cls: type[EntityT], record_id: UUID) -> Optional[EntityT]:
        """Like get, but returns None for unknown ids."""
        try:
            return await self.get(entity_cls, record_id)
        except RecordNotFoundError:
            return None

    async def list(
        self,
        entity_cls: type[EntityT],
        *,
        where: Optional[Callable[[EntityT], bool]] = None,
        newest_first: bool = True,
        limit: Optional[int] = None,
    ) -> list[EntityT]:
        """
        List records of one type.

        Records are ordered by created_at (ties broken by id), newest
        first unless newest_first is False.
        """
        kind = entity_kind(entity_cls)
        entities = [entity_cls.from_dict(data) for data in await self._fetch_all(kind)]
        if where is not None:
            entities = [entity for entity in entities if where(entity)]
        entities.sort(key=lambda e: (e.created_at, str(e.id)), reverse=newest_first)
        if limit is not None:
            entities = entities[:limit]
        return entities

    async def count(
        self,
        entity_cls: type[EntityT],
        *,
        where: Optional[Callable[[EntityT], bool]] = None,
    ) -> int:
        return len(await self.list(entity_cls, where=where))

    async def update(
        self,
        entity_cls: type[EntityT],
        record_id: UUID,
        patch: dict[str, Any],
    ) -> EntityT:
        """
        Apply a partial update.

        Args:
            entity_cls: Domain model class
            record_id: Record id
            patch: Serialized field values to overwrite

        Returns:
            The updated entity

        Raises:
            RecordNotFoundError: If no such record exists
        """
        kind = entity_kind(entity_cls)
        if "id" in patch and str(patch["id"]) != str(record_id):
            raise ValueError("Record id cannot be changed")
        merged = await self._patch(kind, str(record_id), patch)
        return entity_cls.from_dict(merged)

    async def save(self, entity: EntityT) -> EntityT:
        """Overwrite a stored record with the entity's current state."""
        await self.update(type(entity), entity.id, entity.to_dict())
        return entity
