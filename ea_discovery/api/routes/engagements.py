"""Engagement routes: list, load, upsert, delete, plus stored-engagement downloads."""

from fastapi import APIRouter, Depends, HTTPException

from ea_discovery.api.routes.artifacts import diagram_response, export_response
from ea_discovery.diagrams import DiagramKind
from ea_discovery.schemas.engagements import DeleteEngagementResponse, EngagementRecord
from ea_discovery.services.engagement_store import EngagementStore, get_engagement_store

router = APIRouter()


async def _load_or_404(store: EngagementStore, engagement_id: str) -> EngagementRecord:
    record = await store.get(engagement_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Engagement not found")
    return record


@router.get("", response_model=list[EngagementRecord])
async def list_engagements(store: EngagementStore = Depends(get_engagement_store)):
    """All engagements, newest first."""
    return await store.list_engagements()


@router.put("", response_model=EngagementRecord)
async def save_engagement(
    record: EngagementRecord,
    store: EngagementStore = Depends(get_engagement_store),
):
    """Insert or update by id; an id is minted when the body has none."""
    return await store.upsert(record)


@router.get("/{engagement_id}", response_model=EngagementRecord)
async def get_engagement(engagement_id: str, store: EngagementStore = Depends(get_engagement_store)):
    return await _load_or_404(store, engagement_id)


@router.delete("/{engagement_id}", response_model=DeleteEngagementResponse)
async def delete_engagement(engagement_id: str, store: EngagementStore = Depends(get_engagement_store)):
    if not await store.delete(engagement_id):
        raise HTTPException(status_code=404, detail="Engagement not found")
    return DeleteEngagementResponse(id=engagement_id, deleted=True)


@router.get("/{engagement_id}/diagrams/{kind}")
async def get_engagement_diagram(
    engagement_id: str,
    kind: DiagramKind,
    store: EngagementStore = Depends(get_engagement_store),
):
    record = await _load_or_404(store, engagement_id)
    return diagram_response(kind, record.artifacts, record.discovery())


@router.get("/{engagement_id}/export")
async def export_stored_engagement(engagement_id: str, store: EngagementStore = Depends(get_engagement_store)):
    record = await _load_or_404(store, engagement_id)
    return export_response(record.artifacts, record.discovery())
