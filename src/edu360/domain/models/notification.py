"""Parent notification domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from edu360.domain.models.base import iso, parse_datetime, parse_uuid, utcnow


@dataclass
class ParentNotification:
    """
    Notification addressed to one parent about one of their children.

    Attributes:
        parent_id: Recipient parent
        student_id: Child the notification is about
        type: Machine-readable kind (panic_alert, wellness_concern, ...)
        title: Short headline
        message: Body text
        read: Whether the parent has opened it
    """

    parent_id: UUID
    student_id: UUID
    type: str
    title: str
    message: str
    id: UUID = field(default_factory=uuid4)
    read: bool = False
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "parent_id": str(self.parent_id),
            "student_id": str(self.student_id),
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "read": self.read,
            "created_at": iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParentNotification":
        return cls(
            id=parse_uuid(data["id"]),
            parent_id=parse_uuid(data["parent_id"]),
            student_id=parse_uuid(data["student_id"]),
            type=data["type"],
            title=data["title"],
            message=data["message"],
            read=data.get("read", False),
            created_at=parse_datetime(data["created_at"]),
        )
