"""
Record Database Model

Keyed record table backing the SQL event store. Every entity type
lives in the same table, distinguished by `kind`, with the serialized
domain model in `payload`.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from edu360.infrastructure.database.connection import Base


class RecordModel(Base):
    """
    Records table ORM model.

    Table: records
    """

    __tablename__ = "records"

    kind: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        doc="Entity type (users, mood_checkins, ...)"
    )
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        doc="Entity UUID as text"
    )
    payload: Mapped[dict] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        doc="Serialized domain model"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Entity creation time, copied from the payload"
    )

    __table_args__ = (
        Index("ix_records_kind_created_at", "kind", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<RecordModel(kind={self.kind}, id={self.id})>"
