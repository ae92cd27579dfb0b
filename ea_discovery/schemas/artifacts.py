"""Pydantic schemas for the architecture artifact bundle.

Five fixed top-level sections:
- CapabilityMap: business drivers + six capability categories
- currentStateArchitecture / futureStateArchitecture: ArchitectureState (three pace layers)
- prioritizationMatrix: list of PrioritizedInitiative
- strategicRoadmap: list of RoadmapPhase

Validation is deliberately forgiving: missing sections become empty
containers, scalar list entries are promoted to objects, and label-bearing
fields go through ``coerce_label`` (flags through ``coerce_flag``). Unknown keys are preserved (extra="allow")
so exports round-trip whatever the model produced.
"""

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ea_discovery.schemas.labels import Flag, Label, LabelList, as_list

CAPABILITY_CATEGORIES = (
    "sales",
    "service",
    "marketing",
    "commerce",
    "platform_data",
    "industry_specific",
)

ARCHITECTURE_TIERS = ("systems_of_innovation", "systems_of_differentiation", "systems_of_record")

BUNDLE_SECTIONS = (
    "capability_map",
    "current_state_architecture",
    "future_state_architecture",
    "prioritization_matrix",
    "strategic_roadmap",
)


class ArtifactModel(BaseModel):
    """Base for bundle models: camelCase wire names, tolerant input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    # Field that a bare scalar entry (e.g. "SAP ERP") is promoted into.
    scalar_field: ClassVar[str | None] = None

    @model_validator(mode="before")
    @classmethod
    def _promote_scalars(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        if isinstance(data, BaseModel):
            return data
        if cls.scalar_field and isinstance(data, (str, int, float)) and not isinstance(data, bool):
            return {cls.scalar_field: data}
        return {}

    def dump(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Capability(ArtifactModel):
    scalar_field = "capability"

    capability: Label = ""
    description: Label = ""
    salesforce_products: LabelList = Field(default_factory=list)


CapabilityList = Annotated[list[Capability], BeforeValidator(as_list)]


class CapabilityMap(ArtifactModel):
    business_drivers: LabelList = Field(default_factory=list)
    sales: CapabilityList = Field(default_factory=list)
    service: CapabilityList = Field(default_factory=list)
    marketing: CapabilityList = Field(default_factory=list)
    commerce: CapabilityList = Field(default_factory=list)
    platform_data: CapabilityList = Field(default_factory=list)
    industry_specific: CapabilityList = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.business_drivers and not any(getattr(self, c) for c in CAPABILITY_CATEGORIES)


class ArchitectureSystem(ArtifactModel):
    """One system box; current- and future-state fields share the model."""

    scalar_field = "name"

    name: Label = ""
    # current state
    business_capability: Label = ""
    emerging_capability: Label = ""
    salesforce_opportunity: Label = ""
    recommended_salesforce_products: LabelList = Field(default_factory=list)
    # future state
    future_vision: Label = ""
    salesforce_products: LabelList = Field(default_factory=list)
    timeline: Label = ""
    benefits: LabelList = Field(default_factory=list)
    # provenance flags set by the synthesizer
    inferred: Flag = False
    synthesized: Flag = False


SystemList = Annotated[list[ArchitectureSystem], BeforeValidator(as_list)]


class PlatformComponents(ArtifactModel):
    data_unification: Label = ""
    integration: Label = ""
    analytics: Label = ""
    ai_automation: Label = ""


class ArchitectureState(ArtifactModel):
    overview: Label = ""
    platform_components: PlatformComponents | None = None
    systems_of_record: SystemList = Field(default_factory=list)
    systems_of_differentiation: SystemList = Field(default_factory=list)
    systems_of_innovation: SystemList = Field(default_factory=list)
    synthesized: Flag = False

    def has_systems(self) -> bool:
        return any(getattr(self, tier) for tier in ARCHITECTURE_TIERS)

    def is_empty(self) -> bool:
        return not self.overview and not self.has_systems()


class PrioritizedInitiative(ArtifactModel):
    scalar_field = "initiative"

    initiative: Label = ""
    business_value: Label = ""
    effort: Label = ""
    roi: Label = ""
    priority: Label = ""
    description: Label = ""


class RoadmapPhase(ArtifactModel):
    scalar_field = "phase"

    phase: Label = ""
    initiatives: LabelList = Field(default_factory=list)
    outcomes: LabelList = Field(default_factory=list)


class ArtifactBundle(ArtifactModel):
    capability_map: CapabilityMap = Field(default_factory=CapabilityMap)
    current_state_architecture: ArchitectureState = Field(default_factory=ArchitectureState)
    future_state_architecture: ArchitectureState = Field(default_factory=ArchitectureState)
    prioritization_matrix: Annotated[list[PrioritizedInitiative], BeforeValidator(as_list)] = Field(
        default_factory=list
    )
    strategic_roadmap: Annotated[list[RoadmapPhase], BeforeValidator(as_list)] = Field(default_factory=list)
    # Names (camelCase) of sections filled in by the synthesizer rather than the model.
    synthesized_sections: list[str] = Field(default_factory=list)
