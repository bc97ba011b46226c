"""
User Directory

Read-side lookups over stored users: counselor routing for emergency
reports, parent/child links for notification fan-out.
"""

from typing import Optional
from uuid import UUID

from edu360.domain.enums.wellness import UserRole
from edu360.domain.models import User
from edu360.infrastructure.store.base import EventStore


class UserDirectory:
    """
    User lookups over an event store.

    Usage:
        directory = UserDirectory(store)
        counselor = await directory.find_available_counselor()
    """

    def __init__(self, store: EventStore) -> None:
        self._store = store

    async def get(self, user_id: UUID) -> Optional[User]:
        return await self._store.find(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        matches = await self._store.list(User, where=lambda u: u.email.lower() == email, limit=1)
        return matches[0] if matches else None

    async def find_available_counselor(self) -> Optional[User]:
        """
        Pick the counselor for an emergency report.

        Candidates are active users with the counselor role. The earliest
        registered wins; ties on created_at go to the lowest id.

        Returns:
            The counselor, or None when nobody is available
        """
        counselors = await self._store.list(
            User,
            where=lambda u: u.is_available_counselor,
            newest_first=False,
            limit=1,
        )
        return counselors[0] if counselors else None

    async def children_of(self, parent_id: UUID) -> list[User]:
        return await self._store.list(
            User,
            where=lambda u: u.role == UserRole.STUDENT and u.parent_id == parent_id,
            newest_first=False,
        )

    async def recent_users(self, limit: int = 10) -> list[User]:
        return await self._store.list(User, limit=limit)
