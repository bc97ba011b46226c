"""
SQL Event Store

Keyed record table through SQLAlchemy async. PostgreSQL (asyncpg) in
production; any async dialect works, tests use aiosqlite.
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from edu360.config.logging_config import get_logger
from edu360.domain.models.base import parse_datetime, utcnow
from edu360.infrastructure.database.connection import DatabaseManager
from edu360.infrastructure.database.models import RecordModel
from edu360.infrastructure.store.base import (
    DuplicateRecordError,
    EventStore,
    RecordNotFoundError,
    StoreUnavailableError,
)

logger = get_logger(__name__)


class SqlEventStore(EventStore):
    """
    Event store backed by the `records` table.

    Args:
        db: Database manager owning the engine
        create_tables: Create the schema on initialize (dev and tests)
    """

    def __init__(self, db: DatabaseManager, create_tables: bool = False) -> None:
        self._db = db
        self._create_tables = create_tables

    @property
    def backend_name(self) -> str:
        return "sql"

    async def initialize(self) -> None:
        try:
            await self._db.initialize()
            if self._create_tables:
                await self._db.create_all()
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(f"Cannot connect to database: {e}") from e

    async def close(self) -> None:
        await self._db.close()

    async def health_check(self) -> bool:
        return await self._db.health_check()

    async def _insert(self, kind: str, record_id: str, data: dict[str, Any]) -> None:
        created_at = parse_datetime(data.get("created_at")) or utcnow()
        try:
            async with self._db.session() as session:
                session.add(
                    RecordModel(kind=kind, id=record_id, payload=data, created_at=created_at)
                )
        except IntegrityError as e:
            raise DuplicateRecordError(f"{kind} record {record_id} already exists") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("Record insert failed", kind=kind, record_id=record_id, error=str(e))
            raise StoreUnavailableError(str(e)) from e

    async def _fetch(self, kind: str, record_id: str) -> Optional[dict[str, Any]]:
        try:
            async with self._db.session() as session:
                row = await session.get(RecordModel, (kind, record_id))
                return dict(row.payload) if row is not None else None
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(str(e)) from e

    async def _fetch_all(self, kind: str) -> list[dict[str, Any]]:
        try:
            async with self._db.session() as session:
                result = await session.execute(
                    select(RecordModel.payload)
                    .where(RecordModel.kind == kind)
                    .order_by(RecordModel.created_at)
                )
                return [dict(payload) for payload in result.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(str(e)) from e

    async def _patch(self, kind: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        try:
            async with self._db.session() as session:
                row = await session.get(RecordModel, (kind, record_id), with_for_update=True)
                if row is None:
                    raise RecordNotFoundError(kind, record_id)
                # Reassign so the JSON column is marked dirty
                row.payload = {**row.payload, **patch}
                return dict(row.payload)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Record update failed", kind=kind, record_id=record_id, error=str(e))
            raise StoreUnavailableError(str(e)) from e
