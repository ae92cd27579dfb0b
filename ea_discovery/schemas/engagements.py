"""Pydantic schemas for persisted engagements."""

from datetime import datetime

from pydantic import BaseModel

from ea_discovery.schemas.artifacts import ArtifactBundle
from ea_discovery.schemas.discovery import COMBINE_FIELDS, REPLACE_FIELDS, DiscoveryRecord

DISCOVERY_FIELDS = (*REPLACE_FIELDS, *COMBINE_FIELDS)


class EngagementRecord(DiscoveryRecord):
    """Discovery fields flattened alongside identity, timestamps and artifacts.

    ``id`` is None until the first save mints one.
    """

    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    artifacts: ArtifactBundle | None = None

    @classmethod
    def from_discovery(
        cls,
        discovery: DiscoveryRecord,
        artifacts: ArtifactBundle | None = None,
        engagement_id: str | None = None,
    ) -> "EngagementRecord":
        return cls(id=engagement_id, artifacts=artifacts, **discovery_values(discovery))

    def discovery(self) -> DiscoveryRecord:
        return DiscoveryRecord(**discovery_values(self))


def discovery_values(record: DiscoveryRecord) -> dict[str, str]:
    return {field: getattr(record, field) for field in DISCOVERY_FIELDS}


class DeleteEngagementResponse(BaseModel):
    id: str
    deleted: bool
