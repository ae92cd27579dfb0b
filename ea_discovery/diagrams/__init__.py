"""SVG diagram renderers.

Pure functions of (artifact section, discovery record): identical input
always yields byte-identical markup, and an absent section yields "".
"""

from ea_discovery.diagrams.registry import DiagramKind, available_diagrams, render_diagram

__all__ = ["DiagramKind", "available_diagrams", "render_diagram"]
