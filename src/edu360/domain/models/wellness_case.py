"""
Wellness Case Domain Model

A counselor's ongoing case for one student, with private notes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from edu360.domain.enums.wellness import AlertPriority, CaseStatus
from edu360.domain.models.base import (
    iso,
    parse_datetime,
    parse_uuid,
    utcnow,
)


@dataclass
class WellnessCase:
    """
    Wellness case record.

    Attributes:
        student_id: Student the case concerns
        counselor_id: Counselor owning the case
        title: Short case title
        description: Optional longer summary
        priority: Case priority
        status: Lifecycle status
        last_contact: When the counselor last recorded contact
    """

    student_id: UUID
    counselor_id: UUID
    title: str
    id: UUID = field(default_factory=uuid4)
    description: Optional[str] = None
    priority: AlertPriority = AlertPriority.MEDIUM
    status: CaseStatus = CaseStatus.OPEN
    last_contact: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status != CaseStatus.CLOSED

    def record_contact(self, at: Optional[datetime] = None) -> None:
        self.last_contact = at or utcnow()
        self.updated_at = utcnow()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "student_id": str(self.student_id),
            "counselor_id": str(self.counselor_id),
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "status": self.status.value,
            "last_contact": iso(self.last_contact),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WellnessCase":
        return cls(
            id=parse_uuid(data["id"]),
            student_id=parse_uuid(data["student_id"]),
            counselor_id=parse_uuid(data["counselor_id"]),
            title=data["title"],
            description=data.get("description"),
            priority=AlertPriority(data.get("priority", AlertPriority.MEDIUM.value)),
            status=CaseStatus(data.get("status", CaseStatus.OPEN.value)),
            last_contact=parse_datetime(data.get("last_contact")),
            created_at=parse_datetime(data["created_at"]),
            updated_at=parse_datetime(data["updated_at"]),
        )


@dataclass
class CounselorNote:
    """A counselor's note on a wellness case. Private by default."""

    case_id: UUID
    counselor_id: UUID
    note: str
    id: UUID = field(default_factory=uuid4)
    is_private: bool = True
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "case_id": str(self.case_id),
            "counselor_id": str(self.counselor_id),
            "note": self.note,
            "is_private": self.is_private,
            "created_at": iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CounselorNote":
        return cls(
            id=parse_uuid(data["id"]),
            case_id=parse_uuid(data["case_id"]),
            counselor_id=parse_uuid(data["counselor_id"]),
            note=data["note"],
            is_private=data.get("is_private", True),
            created_at=parse_datetime(data["created_at"]),
        )
