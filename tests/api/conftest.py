"""Fixtures for route tests: app with store and gateway overridden."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from ea_discovery.agent.gateway import get_gateway
from ea_discovery.core.exceptions import PersistenceError
from ea_discovery.main import create_app
from ea_discovery.schemas.engagements import EngagementRecord
from ea_discovery.services.engagement_store import get_engagement_store


class InMemoryEngagementStore:
    """Dict-backed stand-in for EngagementStore with the same async surface."""

    def __init__(self):
        self.rows: dict[str, EngagementRecord] = {}
        self.fail = False
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _check(self, message: str) -> None:
        if self.fail:
            raise PersistenceError(message)

    async def list_engagements(self) -> list[EngagementRecord]:
        self._check("Failed to load engagements")
        return sorted(self.rows.values(), key=lambda r: r.created_at, reverse=True)

    async def get(self, engagement_id: str) -> EngagementRecord | None:
        self._check("Failed to load engagement")
        return self.rows.get(engagement_id)

    async def upsert(self, record: EngagementRecord) -> EngagementRecord:
        self._check("Failed to save engagement")
        engagement_id = record.id or str(uuid.uuid4())
        existing = self.rows.get(engagement_id)
        now = self._tick()
        stored = record.model_copy(
            update={
                "id": engagement_id,
                "created_at": existing.created_at if existing else now,
                "updated_at": now,
            }
        )
        self.rows[engagement_id] = stored
        return stored

    async def delete(self, engagement_id: str) -> bool:
        self._check("Failed to delete engagement")
        return self.rows.pop(engagement_id, None) is not None


@pytest.fixture
def store() -> InMemoryEngagementStore:
    return InMemoryEngagementStore()


@pytest.fixture
def app(store, fake_gateway):
    app = create_app()
    app.dependency_overrides[get_engagement_store] = lambda: store
    app.dependency_overrides[get_gateway] = lambda: fake_gateway
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    # No context manager: the lifespan (database init) is not needed here.
    return TestClient(app)
