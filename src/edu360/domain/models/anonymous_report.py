"""
Anonymous Report Domain Model

Reports submitted without an author (bullying, safety, substance...).
Status and counselor assignment are mutable by the escalation engine
and by counselor action.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from edu360.domain.enums.wellness import ReportStatus, ReportType
from edu360.domain.models.base import (
    iso,
    parse_datetime,
    parse_uuid,
    utcnow,
    uuid_str,
)


@dataclass
class AnonymousReport:
    """
    Anonymous report record.

    Attributes:
        id: Unique report identifier
        report_type: Report category
        description: Reporter's account
        is_emergency: Whether the reporter marked it as an emergency
        location: Optional free-text location
        status: Lifecycle status
        assigned_counselor_id: Counselor handling the report
        created_at: Submission timestamp
        updated_at: Last change timestamp
    """

    report_type: ReportType
    description: str
    id: UUID = field(default_factory=uuid4)
    is_emergency: bool = False
    location: Optional[str] = None
    status: ReportStatus = ReportStatus.PENDING
    assigned_counselor_id: Optional[UUID] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_open(self) -> bool:
        return self.status != ReportStatus.CLOSED

    def assign_counselor(self, counselor_id: UUID) -> None:
        self.assigned_counselor_id = counselor_id
        self.updated_at = utcnow()

    def set_status(self, status: ReportStatus) -> None:
        self.status = status
        self.updated_at = utcnow()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "report_type": self.report_type.value,
            "description": self.description,
            "is_emergency": self.is_emergency,
            "location": self.location,
            "status": self.status.value,
            "assigned_counselor_id": uuid_str(self.assigned_counselor_id),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnonymousReport":
        return cls(
            id=parse_uuid(data["id"]),
            report_type=ReportType(data["report_type"]),
            description=data["description"],
            is_emergency=data.get("is_emergency", False),
            location=data.get("location"),
            status=ReportStatus(data.get("status", ReportStatus.PENDING.value)),
            assigned_counselor_id=parse_uuid(data.get("assigned_counselor_id")),
            created_at=parse_datetime(data["created_at"]),
            updated_at=parse_datetime(data["updated_at"]),
        )
