"""
Panic Alert Domain Model

Created when a student presses the panic button. Always escalated at
maximum severity; the only later change is resolution by staff.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from edu360.domain.models.base import (
    iso,
    parse_datetime,
    parse_uuid,
    utcnow,
    uuid_str,
)


@dataclass(frozen=True)
class GeoPoint:
    """Device location captured with a panic press."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    address: Optional[str] = None

    def describe(self) -> str:
        """Human-readable location for alert messages."""
        if self.address:
            return self.address
        return f"{self.latitude:.5f}, {self.longitude:.5f}"

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GeoPoint":
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            accuracy=data.get("accuracy"),
            address=data.get("address"),
        )


class PanicAlertAlreadyResolvedError(Exception):
    """Raised when resolving a panic alert twice."""

    def __init__(self, alert_id: UUID) -> None:
        super().__init__(f"Panic alert {alert_id} is already resolved")
        self.alert_id = alert_id


@dataclass
class PanicAlert:
    """
    Panic alert record.

    Attributes:
        id: Unique alert identifier
        user_id: Student who pressed the button
        location: Optional device location
        resolved: Whether staff closed the alert
        resolved_by: Staff member who resolved it
        resolved_at: Resolution timestamp
        created_at: Press timestamp
    """

    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    location: Optional[GeoPoint] = None
    resolved: bool = False
    resolved_by: Optional[UUID] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)

    def resolve(self, resolved_by: UUID) -> None:
        """
        Mark alert as resolved.

        Raises:
            PanicAlertAlreadyResolvedError: If already resolved
        """
        if self.resolved:
            raise PanicAlertAlreadyResolvedError(self.id)
        self.resolved = True
        self.resolved_by = resolved_by
        self.resolved_at = utcnow()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "location": self.location.to_dict() if self.location else None,
            "resolved": self.resolved,
            "resolved_by": uuid_str(self.resolved_by),
            "resolved_at": iso(self.resolved_at),
            "created_at": iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PanicAlert":
        location = data.get("location")
        return cls(
            id=parse_uuid(data["id"]),
            user_id=parse_uuid(data["user_id"]),
            location=GeoPoint.from_dict(location) if location else None,
            resolved=data.get("resolved", False),
            resolved_by=parse_uuid(data.get("resolved_by")),
            resolved_at=parse_datetime(data.get("resolved_at")),
            created_at=parse_datetime(data["created_at"]),
        )
