"""Discovery record: the free-text intake answers for an engagement.

Imported values are merged, never silently overwritten:
- identity/scalar fields (company, industry, timeline, budget) take a non-empty import
- narrative fields are concatenated through ``combine_text``
"""

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

DUPLICATE_PREFIX_LENGTH = 50

REPLACE_FIELDS = ("company_name", "industry", "timeline", "budget")
COMBINE_FIELDS = (
    "business_context",
    "current_challenges",
    "strategic_goals",
    "technical_landscape",
    "constraints",
)


class DiscoveryRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    company_name: str = ""
    industry: str = ""
    business_context: str = ""
    current_challenges: str = ""
    strategic_goals: str = ""
    technical_landscape: str = ""
    constraints: str = ""
    timeline: str = ""
    budget: str = ""

    @field_validator(*REPLACE_FIELDS, *COMBINE_FIELDS, mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, list):
            return "\n".join(str(v) for v in value if v)
        return value


def combine_text(existing: str, new_text: str) -> str:
    """Append ``new_text`` to ``existing`` unless it is empty or already present.

    Near-duplicates are detected by checking whether the first 50 characters
    of the new text already occur (case-insensitive) in the existing text.
    """
    if not existing:
        return new_text or ""
    if not new_text:
        return existing
    if new_text[:DUPLICATE_PREFIX_LENGTH].lower() in existing.lower():
        return existing
    return f"{existing}\n\n{new_text}"


def merge_extracted(existing: DiscoveryRecord, extracted: DiscoveryRecord) -> DiscoveryRecord:
    """Merge model-extracted discovery fields into the record being edited."""
    merged = {}
    for field in REPLACE_FIELDS:
        merged[field] = getattr(extracted, field) or getattr(existing, field)
    for field in COMBINE_FIELDS:
        merged[field] = combine_text(getattr(existing, field), getattr(extracted, field))
    return DiscoveryRecord(**merged)
