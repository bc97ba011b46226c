"""
User Domain Model

Represents a platform user: students, teachers, parents, counselors
and administrators. Authentication data is deliberately absent; the
directory only carries what routing and dashboards need.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from edu360.domain.enums.wellness import UserRole
from edu360.domain.models.base import (
    iso,
    parse_datetime,
    parse_uuid,
    utcnow,
    uuid_str,
)


@dataclass
class User:
    """
    Core user entity.

    Attributes:
        id: Unique user identifier
        email: Contact email, unique across the directory
        first_name: Given name
        last_name: Family name
        role: Platform role
        grade: School grade (students only)
        parent_id: Linked parent account (students only)
        is_active: Whether the account can receive assignments
        created_at: Registration timestamp, used for counselor tie-breaks
        updated_at: Last update timestamp
    """

    email: str
    first_name: str
    last_name: str
    role: UserRole
    id: UUID = field(default_factory=uuid4)
    grade: Optional[str] = None
    parent_id: Optional[UUID] = None
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        """Validate user data after initialization."""
        if not self._is_valid_email(self.email):
            raise ValueError(f"Invalid email format: {self.email}")

    @staticmethod
    def _is_valid_email(email: str) -> bool:
        """Basic email format validation."""
        return "@" in email and "." in email.split("@")[-1]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_available_counselor(self) -> bool:
        """Whether this user can be assigned an emergency report."""
        return self.role == UserRole.COUNSELOR and self.is_active

    def deactivate(self) -> None:
        """Deactivate user account."""
        self.is_active = False
        self.updated_at = utcnow()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "role": self.role.value,
            "grade": self.grade,
            "parent_id": uuid_str(self.parent_id),
            "is_active": self.is_active,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=parse_uuid(data["id"]),
            email=data["email"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            role=UserRole(data["role"]),
            grade=data.get("grade"),
            parent_id=parse_uuid(data.get("parent_id")),
            is_active=data.get("is_active", True),
            created_at=parse_datetime(data["created_at"]),
            updated_at=parse_datetime(data["updated_at"]),
        )
