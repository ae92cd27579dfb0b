"""ArtifactGenerator: discovery record in, validated artifact bundle out.

Pipeline: generation prompt -> ModelGateway -> tolerant JSON recovery ->
ArtifactBundle validation (labels coerced here) -> fallback synthesis.
"""

import structlog
from pydantic import ValidationError

from ea_discovery.agent.gateway import ModelGateway
from ea_discovery.agent.llm_helpers import recover_json_object
from ea_discovery.artifacts.prompts import build_generation_prompt
from ea_discovery.artifacts.synthesizer import fill_missing_sections
from ea_discovery.core.exceptions import MalformedModelOutputError
from ea_discovery.schemas.artifacts import ArtifactBundle
from ea_discovery.schemas.discovery import DiscoveryRecord

logger = structlog.get_logger(__name__)


def parse_bundle(raw: str) -> ArtifactBundle:
    """Recover and validate a bundle from raw model text.

    Raises:
        MalformedModelOutputError: If the text is not a JSON object or fails validation
    """
    data = recover_json_object(raw)
    try:
        return ArtifactBundle.model_validate(data)
    except ValidationError as e:
        logger.error("artifact_bundle_invalid", errors=e.error_count())
        raise MalformedModelOutputError(raw, "Model response did not match the artifact structure") from e


class ArtifactGenerator:
    """Generates the five-section artifact bundle for one engagement.

    Takes a ModelGateway so tests can pass a fake with an AsyncMock ``complete``.
    """

    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway

    async def generate(self, discovery: DiscoveryRecord) -> ArtifactBundle:
        prompt = build_generation_prompt(discovery)
        max_tokens = self.gateway.settings.generation_max_tokens
        logger.info("artifact_generation_started", company=discovery.company_name, max_tokens=max_tokens)

        raw = await self.gateway.complete(prompt, max_tokens=max_tokens)
        bundle = fill_missing_sections(parse_bundle(raw), discovery)

        logger.info(
            "artifact_generation_completed",
            company=discovery.company_name,
            initiatives=len(bundle.prioritization_matrix),
            phases=len(bundle.strategic_roadmap),
            synthesized=bundle.synthesized_sections,
        )
        return bundle
