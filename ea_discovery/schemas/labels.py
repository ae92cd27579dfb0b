"""Label coercion at the ingestion boundary.

Model output puts strings, numbers, objects or nothing where a label is
expected. Every such value is resolved once, when the artifact bundle is
validated, so renderers and views only ever see plain strings and never
embed "None", "{...}" or "[...]" reprs. Label text is also cleared of the
C0 control characters XML 1.0 forbids, since labels end up inside SVG.
"""

import re
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator

# Tried in order when a label arrives as an object.
LABEL_PROPERTIES = ("name", "description", "text", "value", "product", "benefit")

# Tab, LF and CR are the only C0 characters allowed in XML 1.0.
_XML_INVALID_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def strip_control_chars(text: str) -> str:
    return _XML_INVALID_CHARS.sub("", text)


def coerce_label(value: Any, fallback: str = "") -> str:
    """Resolve an arbitrary value to label text.

    Strings pass through, numbers stringify, objects yield their first
    non-empty label property; anything else returns ``fallback``.
    """
    if isinstance(value, str):
        return strip_control_chars(value)
    if isinstance(value, bool) or value is None:
        return fallback
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, dict):
        for key in LABEL_PROPERTIES:
            candidate = value.get(key)
            if isinstance(candidate, (str, int, float)) and not isinstance(candidate, bool):
                text = coerce_label(candidate)
                if text:
                    return text
    return fallback


def coerce_flag(value: Any) -> bool:
    """Booleans pass through, ``"true"``/``"false"`` in any case parse; anything else is False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, (tuple, set)):
        return list(value)
    return [value]


def _drop_empty(values: list[str]) -> list[str]:
    return [v for v in values if v]


Label = Annotated[str, BeforeValidator(coerce_label)]
LabelList = Annotated[list[Label], BeforeValidator(as_list), AfterValidator(_drop_empty)]
Flag = Annotated[bool, BeforeValidator(coerce_flag)]
