"""Engagement model: one row per client engagement (discovery answers + artifacts)."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from ea_discovery.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Engagement(Base):
    __tablename__ = "engagements"

    # Minted by the client (uuid4 string) on first save
    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    company_name = Column(String(255), nullable=False, default="")
    industry = Column(String(255), nullable=False, default="")
    business_context = Column(Text, nullable=False, default="")
    current_challenges = Column(Text, nullable=False, default="")
    strategic_goals = Column(Text, nullable=False, default="")
    technical_landscape = Column(Text, nullable=False, default="")
    constraints = Column(Text, nullable=False, default="")
    timeline = Column(Text, nullable=False, default="")
    budget = Column(Text, nullable=False, default="")

    # Null until artifacts are generated; otherwise the full camelCase bundle
    artifacts = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
