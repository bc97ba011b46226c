"""
Derived Alert Domain Model

Counselor-facing and emergency-facing alerts. Only the escalation
engine creates them, and it never mutates one after creation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from edu360.domain.enums.wellness import AlertPriority, AlertSourceType
from edu360.domain.models.base import (
    iso,
    parse_datetime,
    parse_uuid,
    utcnow,
    uuid_str,
)


@dataclass(frozen=True)
class DerivedAlert:
    """
    Alert derived from a source event.

    Attributes:
        source_type: Kind of source record
        source_id: Id of the source record (always resolvable)
        priority: Alert priority
        message: Short description for dashboards
        student_id: Subject student, when the source names one
        id: Unique alert identifier
        created_at: Creation timestamp
    """

    source_type: AlertSourceType
    source_id: UUID
    priority: AlertPriority
    message: str
    student_id: Optional[UUID] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_urgent(self) -> bool:
        return self.priority == AlertPriority.URGENT

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "source_type": self.source_type.value,
            "source_id": str(self.source_id),
            "priority": self.priority.value,
            "message": self.message,
            "student_id": uuid_str(self.student_id),
            "created_at": iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DerivedAlert":
        return cls(
            id=parse_uuid(data["id"]),
            source_type=AlertSourceType(data["source_type"]),
            source_id=parse_uuid(data["source_id"]),
            priority=AlertPriority(data["priority"]),
            message=data["message"],
            student_id=parse_uuid(data.get("student_id")),
            created_at=parse_datetime(data["created_at"]),
        )
