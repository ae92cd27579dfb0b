"""Declarative base and the process-wide engagement database handle.

``engagement_db`` is opened once by the application lifespan and closed on
shutdown. Request-scoped code borrows its session factory through
``engagement_db.sessions()``; tests build their own engines instead.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from ea_discovery.core.config import get_settings

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    pass


class DatabaseNotReady(RuntimeError):
    """Sessions were requested while the engagement database is closed."""


class EngagementDatabase:
    def __init__(self) -> None:
        self.engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    async def open(self, url: str | None = None) -> None:
        """Connect and create missing tables. A second call while open does nothing.

        Args:
            url: SQLAlchemy async URL; defaults to ``settings.database_url``
        """
        if self.is_open:
            return

        settings = get_settings()
        engine = create_async_engine(url or settings.database_url, echo=settings.debug, pool_pre_ping=True)

        # Table classes register on Base.metadata when imported
        from ea_discovery.db import models  # noqa: F401

        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception:
            await engine.dispose()
            raise

        self.engine = engine
        self._sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        logger.info("engagement_db_opened", dialect=engine.dialect.name)

    async def close(self) -> None:
        if self.engine is None:
            return
        engine = self.engine
        self.engine = None
        self._sessions = None
        await engine.dispose()
        logger.info("engagement_db_closed")

    def sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._sessions is None:
            raise DatabaseNotReady("Engagement database is not open")
        return self._sessions


engagement_db = EngagementDatabase()
