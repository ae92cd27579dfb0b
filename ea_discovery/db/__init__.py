"""Database package: declarative base and the engagement database handle."""

from ea_discovery.db.base import Base, DatabaseNotReady, EngagementDatabase, engagement_db

__all__ = ["Base", "DatabaseNotReady", "EngagementDatabase", "engagement_db"]
