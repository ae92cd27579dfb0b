"""Capability map: centered business-driver row above a 3x2 grid of category panels."""

from dataclasses import dataclass, field

from ea_discovery.diagrams.rendering import render_svg
from ea_discovery.diagrams.text import first_line, joined, wrap_text
from ea_discovery.schemas.artifacts import Capability, CapabilityMap
from ea_discovery.schemas.discovery import DiscoveryRecord

WIDTH = 1400
HEIGHT = 1000
BACKGROUND = "#f8f9fa"
TITLE = "Salesforce Business Capability Map"

MAX_DRIVERS = 6
DRIVER_WRAP = 25
DRIVER_MIN_WIDTH = 180
DRIVER_MAX_WIDTH = 280
DRIVER_CHAR_WIDTH = 8
DRIVER_SPACING = 20
DRIVER_Y = 145

PANEL_WIDTH = 400
PANEL_HEIGHT = 300
MAX_CAPABILITIES = 4
CAPABILITY_WRAP = 40
CAPABILITY_LINES = 2
MAX_PRODUCTS = 3
PRODUCT_WRAP = 45

# (field, title, x, y, color) in grid order
CATEGORIES = (
    ("sales", "Sales", 50, 230, "#0176D3"),
    ("service", "Service", 470, 230, "#2E844A"),
    ("marketing", "Marketing", 890, 230, "#8B46FF"),
    ("commerce", "Commerce", 50, 550, "#FF6B35"),
    ("platform_data", "Platform & Data", 470, 550, "#00A1E0"),
    ("industry_specific", "Industry-Specific", 890, 550, "#FFB75D"),
)


@dataclass
class DriverBox:
    x: int
    width: int
    height: int
    lines: list[str]

    @property
    def center(self) -> int:
        return self.x + self.width // 2


@dataclass
class CapabilityBox:
    y: int
    lines: list[str]
    products: str


@dataclass
class CategoryPanel:
    title: str
    x: int
    y: int
    color: str
    boxes: list[CapabilityBox] = field(default_factory=list)


def layout_drivers(drivers: list[str]) -> list[DriverBox]:
    """Size each driver box to its text and center the row on the canvas."""
    sized = []
    for driver in drivers[:MAX_DRIVERS]:
        lines = wrap_text(driver, DRIVER_WRAP)
        width = max(DRIVER_MIN_WIDTH, min(DRIVER_MAX_WIDTH, len(driver) * DRIVER_CHAR_WIDTH))
        height = max(60, 25 + len(lines) * 18)
        sized.append((width, height, lines))

    total = sum(w for w, _, _ in sized) + DRIVER_SPACING * max(len(sized) - 1, 0)
    x = (WIDTH - total) // 2
    boxes = []
    for width, height, lines in sized:
        boxes.append(DriverBox(x=x, width=width, height=height, lines=lines))
        x += width + DRIVER_SPACING
    return boxes


def _capability_box(capability: Capability, y: int) -> CapabilityBox:
    name = capability.capability or capability.description or "Capability"
    return CapabilityBox(
        y=y,
        lines=wrap_text(name, CAPABILITY_WRAP)[:CAPABILITY_LINES],
        products=first_line(joined(capability.salesforce_products, MAX_PRODUCTS), PRODUCT_WRAP),
    )


def layout_panels(capability_map: CapabilityMap) -> list[CategoryPanel]:
    panels = []
    for name, title, x, y, color in CATEGORIES:
        panel = CategoryPanel(title=title, x=x, y=y, color=color)
        for i, capability in enumerate(getattr(capability_map, name)[:MAX_CAPABILITIES]):
            panel.boxes.append(_capability_box(capability, y + 50 + i * 60))
        panels.append(panel)
    return panels


def render_capability_map(capability_map: CapabilityMap | None, discovery: DiscoveryRecord) -> str:
    """Render the capability map, or return "" when there is nothing to draw."""
    if capability_map is None or capability_map.is_empty():
        return ""
    subtitle = " - ".join(v for v in (discovery.company_name, discovery.industry) if v)
    return render_svg(
        "capability_map.svg.j2",
        width=WIDTH,
        height=HEIGHT,
        background=BACKGROUND,
        title=TITLE,
        subtitle=subtitle,
        driver_y=DRIVER_Y,
        drivers=layout_drivers(capability_map.business_drivers),
        panels=layout_panels(capability_map),
        panel_width=PANEL_WIDTH,
        panel_height=PANEL_HEIGHT,
    )
