"""EngagementStore: CRUD for engagement records.

- Constructor dependency injection (session_factory)
- Upsert by id; id minted on first save, created_at set on first insert only
- Listing ordered by created_at descending
- Any SQLAlchemyError surfaces as PersistenceError, never retried here
"""

import uuid

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.attributes import flag_modified

from ea_discovery.core.exceptions import PersistenceError
from ea_discovery.db import engagement_db
from ea_discovery.db.models.engagement import Engagement
from ea_discovery.schemas.engagements import DISCOVERY_FIELDS, EngagementRecord

logger = structlog.get_logger(__name__)


def to_record(row: Engagement) -> EngagementRecord:
    return EngagementRecord(
        id=row.id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        artifacts=row.artifacts,
        **{field: getattr(row, field) or "" for field in DISCOVERY_FIELDS},
    )


class EngagementStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_engagements(self) -> list[EngagementRecord]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(select(Engagement).order_by(Engagement.created_at.desc()))
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("engagement_list_failed", error=str(e))
            raise PersistenceError("Failed to load engagements") from e
        return [to_record(row) for row in rows]

    async def get(self, engagement_id: str) -> EngagementRecord | None:
        try:
            async with self.session_factory() as session:
                row = await session.get(Engagement, engagement_id)
        except SQLAlchemyError as e:
            logger.error("engagement_load_failed", engagement_id=engagement_id, error=str(e))
            raise PersistenceError("Failed to load engagement") from e
        return to_record(row) if row is not None else None

    async def upsert(self, record: EngagementRecord) -> EngagementRecord:
        """Insert or update by id, returning the stored record.

        A record without an id gets a fresh uuid4 string.
        """
        engagement_id = record.id or str(uuid.uuid4())
        artifacts = record.artifacts.dump() if record.artifacts is not None else None

        try:
            async with self.session_factory() as session:
                row = await session.get(Engagement, engagement_id)
                created = row is None
                if created:
                    row = Engagement(id=engagement_id)
                    session.add(row)
                for field in DISCOVERY_FIELDS:
                    setattr(row, field, getattr(record, field))
                row.artifacts = artifacts
                flag_modified(row, "artifacts")
                await session.commit()
                await session.refresh(row)
        except SQLAlchemyError as e:
            logger.error("engagement_save_failed", engagement_id=engagement_id, error=str(e))
            raise PersistenceError("Failed to save engagement") from e

        logger.info("engagement_saved", engagement_id=engagement_id, created=created, has_artifacts=artifacts is not None)
        return to_record(row)

    async def delete(self, engagement_id: str) -> bool:
        """Delete by id. Returns False when no row matched."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(delete(Engagement).where(Engagement.id == engagement_id))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("engagement_delete_failed", engagement_id=engagement_id, error=str(e))
            raise PersistenceError("Failed to delete engagement") from e

        deleted = result.rowcount > 0
        logger.info("engagement_deleted", engagement_id=engagement_id, deleted=deleted)
        return deleted


def get_engagement_store() -> EngagementStore:
    """FastAPI dependency; override via app.dependency_overrides in tests."""
    return EngagementStore(engagement_db.sessions())
