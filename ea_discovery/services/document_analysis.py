"""Document analysis: uploaded files in, extracted discovery fields out."""

import structlog
from pydantic import ValidationError

from ea_discovery.agent.gateway import ModelGateway
from ea_discovery.agent.llm_helpers import recover_json_object
from ea_discovery.artifacts.prompts import build_analysis_prompt
from ea_discovery.core.exceptions import EADiscoveryError, MalformedModelOutputError, NoUsableDocumentsError
from ea_discovery.documents.extractor import is_accepted, prepare_documents
from ea_discovery.documents.guard import check_upload_size
from ea_discovery.schemas.documents import (
    AnalyzeDocumentsResponse,
    DocumentStatusResponse,
    ExtractedDiscovery,
    ProcessingStatus,
    UploadedDocument,
)

logger = structlog.get_logger(__name__)


def _status_rows(documents: list[UploadedDocument]) -> list[DocumentStatusResponse]:
    return [
        DocumentStatusResponse(id=doc.id, name=doc.name, status=doc.status, error=doc.error) for doc in documents
    ]


class DocumentAnalysisService:
    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway

    async def analyze(self, documents: list[UploadedDocument]) -> AnalyzeDocumentsResponse:
        """Extract discovery fields from a batch of uploaded documents.

        A missing API key is reported before anything else, then the size
        guard runs so an oversized batch never reaches the network. Documents
        that cannot be decoded are reported individually; the rest proceed
        through one model call.

        Raises:
            ConfigurationError: No model API key is configured
            PayloadTooLargeError: Batch exceeds the configured ceiling
            NoUsableDocumentsError: Nothing left to analyze
            MalformedModelOutputError: Reply could not be recovered as a JSON object
            UpstreamError: Propagated from the gateway
        """
        self.gateway.ensure_configured()
        settings = self.gateway.settings
        check_upload_size(documents, settings.upload_max_bytes)

        accepted: list[UploadedDocument] = []
        for document in documents:
            if is_accepted(document.name):
                accepted.append(document)
            else:
                document.status = ProcessingStatus.ERROR
                document.error = "Unsupported file type"
        if not accepted:
            raise NoUsableDocumentsError("No supported files were provided")

        blocks = await prepare_documents(accepted)
        content = [*blocks, {"type": "text", "text": build_analysis_prompt()}]
        logger.info("document_analysis_started", documents=len(accepted), content_blocks=len(content))

        try:
            raw = await self.gateway.complete(content, max_tokens=settings.analysis_max_tokens)
            data = recover_json_object(raw)
            try:
                extracted = ExtractedDiscovery.model_validate(data)
            except ValidationError as e:
                raise MalformedModelOutputError(raw, "Model response did not match the discovery structure") from e
        except EADiscoveryError:
            for document in accepted:
                if document.status == ProcessingStatus.PROCESSING:
                    document.status = ProcessingStatus.ERROR
                    document.error = "Analysis failed"
            raise

        for document in accepted:
            if document.status == ProcessingStatus.PROCESSING:
                document.status = ProcessingStatus.COMPLETE

        logger.info(
            "document_analysis_completed",
            company=extracted.company_name,
            systems=len(extracted.systems),
            failed=sum(1 for d in documents if d.status == ProcessingStatus.ERROR),
        )
        return AnalyzeDocumentsResponse(extracted_data=extracted, documents=_status_rows(documents))
