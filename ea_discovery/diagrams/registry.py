"""Diagram kinds and dispatch to their renderers."""

from enum import StrEnum

from ea_discovery.diagrams.capability_map import render_capability_map
from ea_discovery.diagrams.pace_layer import render_pace_layer
from ea_discovery.diagrams.prioritization import render_prioritization_matrix
from ea_discovery.diagrams.roadmap import render_roadmap
from ea_discovery.schemas.artifacts import ArtifactBundle
from ea_discovery.schemas.discovery import DiscoveryRecord


class DiagramKind(StrEnum):
    CAPABILITY_MAP = "capability-map"
    CURRENT_STATE = "current-state"
    FUTURE_STATE = "future-state"
    PRIORITIZATION_MATRIX = "prioritization-matrix"
    ROADMAP = "roadmap"


def render_diagram(kind: DiagramKind, bundle: ArtifactBundle | None, discovery: DiscoveryRecord) -> str:
    """Render one diagram; "" means the section is absent and nothing should be offered."""
    if bundle is None:
        return ""
    if kind == DiagramKind.CAPABILITY_MAP:
        return render_capability_map(bundle.capability_map, discovery)
    if kind == DiagramKind.CURRENT_STATE:
        return render_pace_layer(bundle.current_state_architecture, discovery, future=False)
    if kind == DiagramKind.FUTURE_STATE:
        return render_pace_layer(bundle.future_state_architecture, discovery, future=True)
    if kind == DiagramKind.PRIORITIZATION_MATRIX:
        return render_prioritization_matrix(bundle.prioritization_matrix, discovery)
    if kind == DiagramKind.ROADMAP:
        return render_roadmap(bundle.strategic_roadmap, discovery)
    raise ValueError(f"Unknown diagram kind: {kind}")


def available_diagrams(bundle: ArtifactBundle | None, discovery: DiscoveryRecord) -> list[DiagramKind]:
    """Kinds whose renderer produces output for this bundle."""
    return [kind for kind in DiagramKind if render_diagram(kind, bundle, discovery)]
