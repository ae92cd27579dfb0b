"""Jinja2 environment for the SVG templates.

Autoescaping is on for every template, so labels containing ``&``, ``<`` or
quotes always produce well-formed markup. Every interpolated string is also
passed through ``strip_control_chars`` so free-text discovery fields cannot
smuggle characters an XML parser rejects.
"""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ea_discovery.schemas.labels import strip_control_chars

TEMPLATE_DIR = Path(__file__).parent / "templates"
FONT_FAMILY = "Arial, Helvetica, sans-serif"
FOOTER_TEXT = "Generated by EA Discovery Assistant"


def _finalize(value: Any) -> Any:
    if isinstance(value, str):
        return strip_control_chars(value)
    return value


_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
    finalize=_finalize,
)


def render_svg(template_name: str, **context: Any) -> str:
    template = _env.get_template(template_name)
    return template.render(font_family=FONT_FAMILY, footer=FOOTER_TEXT, **context)
