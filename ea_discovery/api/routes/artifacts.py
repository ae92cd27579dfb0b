"""Artifact routes: generation, SVG diagram downloads, JSON export."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ea_discovery.agent.gateway import ModelGateway, get_gateway
from ea_discovery.artifacts.exporter import diagram_filename, export_filename, render_export
from ea_discovery.artifacts.generator import ArtifactGenerator
from ea_discovery.diagrams import DiagramKind, render_diagram
from ea_discovery.schemas.artifacts import ArtifactBundle
from ea_discovery.schemas.discovery import DiscoveryRecord

router = APIRouter()

SVG_MEDIA_TYPE = "image/svg+xml"
JSON_MEDIA_TYPE = "application/json"


class GenerateArtifactsRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    discovery_data: DiscoveryRecord


class GenerateArtifactsResponse(BaseModel):
    artifacts: ArtifactBundle


class ArtifactDocumentRequest(BaseModel):
    """Discovery record plus (optional) bundle, as held by the browser."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    discovery_data: DiscoveryRecord = Field(default_factory=DiscoveryRecord)
    artifacts: ArtifactBundle | None = None


def attachment_response(content: str, filename: str, media_type: str) -> Response:
    """Download response with an ASCII filename plus the percent-encoded UTF-8 original."""
    fallback = filename.encode("ascii", "ignore").decode().replace('"', "")
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"},
    )


def diagram_response(kind: DiagramKind, artifacts: ArtifactBundle | None, discovery: DiscoveryRecord) -> Response:
    svg = render_diagram(kind, artifacts, discovery)
    if not svg:
        raise HTTPException(status_code=404, detail=f"No data available for the {kind.value} diagram")
    return attachment_response(svg, diagram_filename(discovery.company_name, kind.value), SVG_MEDIA_TYPE)


def export_response(artifacts: ArtifactBundle | None, discovery: DiscoveryRecord) -> Response:
    return attachment_response(
        render_export(discovery, artifacts), export_filename(discovery.company_name), JSON_MEDIA_TYPE
    )


@router.post("/generate-artifacts", response_model=GenerateArtifactsResponse)
async def generate_artifacts(
    request: GenerateArtifactsRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    generator = ArtifactGenerator(gateway)
    bundle = await generator.generate(request.discovery_data)
    return GenerateArtifactsResponse(artifacts=bundle)


@router.post("/diagrams/{kind}")
async def download_diagram(kind: DiagramKind, request: ArtifactDocumentRequest):
    """Render one diagram as an SVG attachment; 404 when its section is absent."""
    return diagram_response(kind, request.artifacts, request.discovery_data)


@router.post("/export")
async def export_engagement(request: ArtifactDocumentRequest):
    return export_response(request.artifacts, request.discovery_data)
