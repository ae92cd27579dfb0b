"""Strategic roadmap: numbered phase cards along a horizontal timeline."""

from dataclasses import dataclass

from ea_discovery.diagrams.rendering import render_svg
from ea_discovery.diagrams.text import truncate, wrap_text
from ea_discovery.schemas.artifacts import RoadmapPhase
from ea_discovery.schemas.discovery import DiscoveryRecord

WIDTH = 1400
HEIGHT = 800
BACKGROUND = "#f8f9fa"
TITLE = "Strategic Roadmap"

TIMELINE_Y = 150
MAX_PHASES = 4
PHASE_SPACING = 300
FIRST_PHASE_X = 150
CARD_WIDTH = 250
CARD_HEIGHT = 500
MAX_ITEMS = 4
ITEM_LIMIT = 30
PHASE_TITLE_WRAP = 28
PHASE_COLORS = ("#0176D3", "#2E844A", "#8B46FF", "#FF6B35")


@dataclass
class PhaseCard:
    number: int
    x: int
    color: str
    title_lines: list[str]
    initiatives: list[str]
    outcomes: list[str]


def layout_phases(phases: list[RoadmapPhase]) -> list[PhaseCard]:
    cards = []
    for i, phase in enumerate(phases[:MAX_PHASES]):
        cards.append(
            PhaseCard(
                number=i + 1,
                x=FIRST_PHASE_X + i * PHASE_SPACING,
                color=PHASE_COLORS[i % len(PHASE_COLORS)],
                title_lines=wrap_text(phase.phase or f"Phase {i + 1}", PHASE_TITLE_WRAP)[:2],
                initiatives=[truncate(text, ITEM_LIMIT) for text in phase.initiatives[:MAX_ITEMS]],
                outcomes=[truncate(text, ITEM_LIMIT) for text in phase.outcomes[:MAX_ITEMS]],
            )
        )
    return cards


def render_roadmap(phases: list[RoadmapPhase] | None, discovery: DiscoveryRecord) -> str:
    if not phases:
        return ""
    return render_svg(
        "roadmap.svg.j2",
        width=WIDTH,
        height=HEIGHT,
        background=BACKGROUND,
        title=TITLE,
        subtitle=discovery.company_name,
        timeline_y=TIMELINE_Y,
        card_width=CARD_WIDTH,
        card_height=CARD_HEIGHT,
        cards=layout_phases(phases),
    )
