"""JSON export document and download filenames.

Export shape: ``{project, discoveryData, artifacts}`` with camelCase keys, the
same document the browser offers as ``<company>.json``.
"""

import json
import re
from typing import Any

from ea_discovery.schemas.artifacts import ArtifactBundle
from ea_discovery.schemas.discovery import DiscoveryRecord

DEFAULT_FILE_STEM = "engagement"

_WHITESPACE = re.compile(r"\s+")


def file_stem(company_name: str) -> str:
    """Company name with whitespace runs replaced by hyphens."""
    return _WHITESPACE.sub("-", (company_name or "").strip()) or DEFAULT_FILE_STEM


def export_filename(company_name: str) -> str:
    return f"{file_stem(company_name)}.json"


def diagram_filename(company_name: str, kind: str) -> str:
    return f"{file_stem(company_name)}-{kind}.svg"


def build_export_document(discovery: DiscoveryRecord, artifacts: ArtifactBundle | None) -> dict[str, Any]:
    return {
        "project": discovery.company_name,
        "discoveryData": discovery.model_dump(by_alias=True),
        "artifacts": artifacts.dump() if artifacts is not None else None,
    }


def render_export(discovery: DiscoveryRecord, artifacts: ArtifactBundle | None) -> str:
    """Serialized export document (pretty-printed, UTF-8 safe)."""
    return json.dumps(build_export_document(discovery, artifacts), indent=2, ensure_ascii=False)
