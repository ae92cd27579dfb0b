"""Prioritization matrix: initiatives plotted on a 2x2 value/effort grid.

Qualitative Low/Medium/High labels map to fixed coordinates; unknown labels
land on the Medium line.
"""

from dataclasses import dataclass

from ea_discovery.diagrams.rendering import render_svg
from ea_discovery.diagrams.text import truncate
from ea_discovery.schemas.artifacts import PrioritizedInitiative
from ea_discovery.schemas.discovery import DiscoveryRecord

WIDTH = 1200
HEIGHT = 900
BACKGROUND = "#ffffff"
TITLE = "Prioritization Matrix"

VALUE_X = {"Low": 250, "Medium": 600, "High": 950}
EFFORT_Y = {"Low": 750, "Medium": 500, "High": 250}
DEFAULT_X = VALUE_X["Medium"]
DEFAULT_Y = EFFORT_Y["Medium"]

MARKER_RADIUS = 40
INITIATIVE_LIMIT = 20

# (value, effort) -> marker color; value alone decides the rest.
PAIR_COLORS = {
    ("High", "Low"): "#2e7d32",
    ("Low", "Low"): "#558b2f",
    ("High", "High"): "#f57f17",
    ("Low", "High"): "#c62828",
}
VALUE_COLORS = {"High": "#2e7d32", "Medium": "#f57f17"}
DEFAULT_COLOR = "#666666"

# Plot area split at the Medium lines.
PLOT_LEFT, PLOT_RIGHT = 100, 1100
PLOT_TOP, PLOT_BOTTOM = 130, 850
QUADRANTS = (
    # x, y, w, h, fill, label
    (PLOT_LEFT, PLOT_TOP, 500, 370, "#ffebee", "Avoid"),
    (600, PLOT_TOP, 500, 370, "#fff8e1", "Major Projects"),
    (PLOT_LEFT, 500, 500, 350, "#f1f8e9", "Fill-Ins"),
    (600, 500, 500, 350, "#e8f5e9", "Quick Wins"),
)


@dataclass
class Marker:
    x: int
    y: int
    color: str
    priority: str
    initiative: str


def normalize_level(label: str) -> str:
    return (label or "").strip().capitalize()


def marker_color(value: str, effort: str) -> str:
    if (value, effort) in PAIR_COLORS:
        return PAIR_COLORS[(value, effort)]
    return VALUE_COLORS.get(value, DEFAULT_COLOR)


def layout_markers(items: list[PrioritizedInitiative]) -> list[Marker]:
    markers = []
    for i, item in enumerate(items):
        value = normalize_level(item.business_value)
        effort = normalize_level(item.effort)
        markers.append(
            Marker(
                x=VALUE_X.get(value, DEFAULT_X),
                y=EFFORT_Y.get(effort, DEFAULT_Y),
                color=marker_color(value, effort),
                priority=item.priority or str(i + 1),
                initiative=truncate(item.initiative or "Initiative", INITIATIVE_LIMIT),
            )
        )
    return markers


def render_prioritization_matrix(items: list[PrioritizedInitiative] | None, discovery: DiscoveryRecord) -> str:
    if not items:
        return ""
    return render_svg(
        "prioritization.svg.j2",
        width=WIDTH,
        height=HEIGHT,
        background=BACKGROUND,
        title=TITLE,
        subtitle=discovery.company_name,
        quadrants=QUADRANTS,
        plot_left=PLOT_LEFT,
        plot_right=PLOT_RIGHT,
        plot_top=PLOT_TOP,
        plot_bottom=PLOT_BOTTOM,
        radius=MARKER_RADIUS,
        markers=layout_markers(items),
    )
