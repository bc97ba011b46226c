"""
Shared helpers for domain model serialization.

Domain models serialize to plain JSON-compatible dictionaries so that
every event store backend (memory, JSON snapshot, SQL JSON column) can
hold them without knowing their shape.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime to ISO-8601, passing None through."""
    return value.isoformat() if value is not None else None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string (or pass a datetime through)."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def uuid_str(value: Optional[UUID]) -> Optional[str]:
    """Serialize a UUID, passing None through."""
    return str(value) if value is not None else None


def parse_uuid(value: Any) -> Optional[UUID]:
    """Parse a UUID string (or pass a UUID through)."""
    if value is None or isinstance(value, UUID):
        return value
    return UUID(str(value))
