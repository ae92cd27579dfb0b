"""Fallback synthesis for sections the model left out.

Placeholder content is derived only from the discovery record or from other
sections of the same bundle, and is always flagged:
- inferred current-state systems carry ``inferred=True``
- synthesized future-state systems carry ``synthesized=True``
- every filled section name is appended to ``synthesized_sections``
"""

import re

import structlog

from ea_discovery.schemas.artifacts import ArchitectureState, ArchitectureSystem, ArtifactBundle
from ea_discovery.schemas.discovery import DiscoveryRecord

logger = structlog.get_logger(__name__)

MAX_INFERRED_SYSTEMS = 8
MAX_SEEDED_DRIVERS = 6

CURRENT_STATE_SECTION = "currentStateArchitecture"
FUTURE_STATE_SECTION = "futureStateArchitecture"
BUSINESS_DRIVERS_SECTION = "capabilityMap.businessDrivers"

_LANDSCAPE_SPLIT = re.compile(r"[\n;,]+")
_GOALS_SPLIT = re.compile(r"[\n;]+|(?<=\.)\s+")
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")

# Keyword -> tier for systems named in free text. First match wins; default is record.
_TIER_KEYWORDS = (
    ("systems_of_innovation", ("ai", "bot", "chatbot", "iot", "machine learning", "ml", "analytics", "agent")),
    ("systems_of_differentiation", ("portal", "website", "web site", "e-commerce", "ecommerce", "mobile app", "cpq")),
)


def split_items(text: str, pattern: re.Pattern = _LANDSCAPE_SPLIT) -> list[str]:
    """Split free text into trimmed, de-bulleted, de-duplicated items."""
    items: list[str] = []
    seen: set[str] = set()
    for part in pattern.split(text or ""):
        item = _BULLET.sub("", part).strip().rstrip(".").strip()
        if item and item.lower() not in seen:
            seen.add(item.lower())
            items.append(item)
    return items


def classify_tier(name: str) -> str:
    words = set(re.findall(r"[a-z0-9-]+", name.lower()))
    lowered = name.lower()
    for tier, keywords in _TIER_KEYWORDS:
        for keyword in keywords:
            if (" " in keyword and keyword in lowered) or keyword in words:
                return tier
    return "systems_of_record"


def infer_current_state(discovery: DiscoveryRecord) -> ArchitectureState | None:
    names = split_items(discovery.technical_landscape)[:MAX_INFERRED_SYSTEMS]
    if not names:
        return None

    tiers: dict[str, list[ArchitectureSystem]] = {
        "systems_of_record": [],
        "systems_of_differentiation": [],
        "systems_of_innovation": [],
    }
    for name in names:
        tier = classify_tier(name)
        field = "emerging_capability" if tier == "systems_of_innovation" else "business_capability"
        tiers[tier].append(
            ArchitectureSystem(name=name, **{field: "Identified in technical landscape"}, inferred=True)
        )
    return ArchitectureState(
        overview="Inferred from the technical landscape captured during discovery.",
        **tiers,
    )


def _future_system(system: ArchitectureSystem) -> ArchitectureSystem:
    capability = system.business_capability or system.emerging_capability
    vision = system.salesforce_opportunity or (f"Modernized {capability}" if capability else "Modernized on platform")
    return ArchitectureSystem(
        name=system.name,
        future_vision=vision,
        salesforce_products=list(system.recommended_salesforce_products),
        synthesized=True,
    )


def synthesize_future_state(current: ArchitectureState) -> ArchitectureState | None:
    if not current.has_systems():
        return None
    return ArchitectureState(
        overview="Synthesized from the current-state assessment.",
        systems_of_record=[_future_system(s) for s in current.systems_of_record],
        systems_of_differentiation=[_future_system(s) for s in current.systems_of_differentiation],
        systems_of_innovation=[_future_system(s) for s in current.systems_of_innovation],
        synthesized=True,
    )


def seed_business_drivers(discovery: DiscoveryRecord) -> list[str]:
    return split_items(discovery.strategic_goals, _GOALS_SPLIT)[:MAX_SEEDED_DRIVERS]


def fill_missing_sections(bundle: ArtifactBundle, discovery: DiscoveryRecord) -> ArtifactBundle:
    """Return a copy of ``bundle`` with absent sections synthesized where possible."""
    bundle = bundle.model_copy(deep=True)
    synthesized = list(bundle.synthesized_sections)

    if not bundle.current_state_architecture.has_systems():
        inferred = infer_current_state(discovery)
        if inferred is not None:
            if bundle.current_state_architecture.overview:
                inferred.overview = bundle.current_state_architecture.overview
            bundle.current_state_architecture = inferred
            synthesized.append(CURRENT_STATE_SECTION)

    if not bundle.future_state_architecture.has_systems():
        future = synthesize_future_state(bundle.current_state_architecture)
        if future is not None:
            existing = bundle.future_state_architecture
            if existing.overview:
                future.overview = existing.overview
            future.platform_components = existing.platform_components
            bundle.future_state_architecture = future
            synthesized.append(FUTURE_STATE_SECTION)

    if not bundle.capability_map.business_drivers:
        drivers = seed_business_drivers(discovery)
        if drivers:
            bundle.capability_map.business_drivers = drivers
            synthesized.append(BUSINESS_DRIVERS_SECTION)

    if synthesized != bundle.synthesized_sections:
        logger.info("artifact_sections_synthesized", sections=synthesized)
    bundle.synthesized_sections = list(dict.fromkeys(synthesized))
    return bundle
