"""
Database infrastructure components.
"""

from edu360.infrastructure.database.connection import Base, DatabaseManager
from edu360.infrastructure.database.models import RecordModel

__all__ = [
    "Base",
    "DatabaseManager",
    "RecordModel",
]
