"""Pace-layered architecture diagram for the current or future state.

Three fixed bands, fastest-changing first. Each band holds up to four system
boxes in a wrapping grid (column = index % 4, row = index // 4).
"""

from dataclasses import dataclass

from ea_discovery.diagrams.rendering import render_svg
from ea_discovery.diagrams.text import truncate
from ea_discovery.schemas.artifacts import ArchitectureState, ArchitectureSystem
from ea_discovery.schemas.discovery import DiscoveryRecord

WIDTH = 1400
HEIGHT = 900
BACKGROUND = "#ffffff"

BAND_X = 50
BAND_WIDTH = 1300
BAND_HEIGHT = 220
MAX_SYSTEMS = 4
COLUMNS = 4
BOX_WIDTH = 300
BOX_HEIGHT = 60
NAME_LIMIT = 30
SUBTITLE_LIMIT = 35
OVERVIEW_LIMIT = 100


@dataclass(frozen=True)
class Band:
    field: str
    title: str
    description: str
    y: int
    fill: str
    stroke: str


BANDS = (
    Band(
        "systems_of_innovation",
        "Systems of Innovation",
        "Fast pace | Experimentation | 6-12 months lifecycle",
        120,
        "#4CAF50",
        "#2E7D32",
    ),
    Band(
        "systems_of_differentiation",
        "Systems of Differentiation",
        "Medium pace | Competitive advantage | 1-3 years lifecycle",
        360,
        "#FF9800",
        "#E65100",
    ),
    Band(
        "systems_of_record",
        "Systems of Record",
        "Slow pace | Core operations | 3-10 years lifecycle",
        600,
        "#2196F3",
        "#0D47A1",
    ),
)


@dataclass
class SystemBox:
    x: int
    y: int
    name: str
    subtitle: str
    flagged: bool


def system_subtitle(system: ArchitectureSystem, innovation: bool, future: bool) -> str:
    if future:
        return system.future_vision or system.business_capability or system.emerging_capability
    if innovation:
        return system.emerging_capability or system.business_capability
    return system.business_capability or system.emerging_capability


def layout_systems(systems: list[ArchitectureSystem], band: Band, future: bool) -> list[SystemBox]:
    innovation = band.field == "systems_of_innovation"
    boxes = []
    for i, system in enumerate(systems[:MAX_SYSTEMS]):
        boxes.append(
            SystemBox(
                x=70 + (i % COLUMNS) * 320,
                y=band.y + 75 + (i // COLUMNS) * 65,
                name=truncate(system.name or "System", NAME_LIMIT),
                subtitle=truncate(system_subtitle(system, innovation, future), SUBTITLE_LIMIT),
                flagged=system.inferred or system.synthesized,
            )
        )
    return boxes


def render_pace_layer(state: ArchitectureState | None, discovery: DiscoveryRecord, future: bool = False) -> str:
    """Render one architecture state; ``future`` selects the future-state fields and title.

    Inferred or synthesized systems are drawn with a dashed outline.
    """
    if state is None or state.is_empty():
        return ""
    title = "Future State Architecture" if future else "Current State Architecture"
    bands = [(band, layout_systems(getattr(state, band.field), band, future)) for band in BANDS]
    return render_svg(
        "pace_layer.svg.j2",
        width=WIDTH,
        height=HEIGHT,
        background=BACKGROUND,
        title=title,
        subtitle=discovery.company_name,
        band_x=BAND_X,
        band_width=BAND_WIDTH,
        band_height=BAND_HEIGHT,
        box_width=BOX_WIDTH,
        box_height=BOX_HEIGHT,
        bands=bands,
        overview=truncate(state.overview, OVERVIEW_LIMIT),
    )
