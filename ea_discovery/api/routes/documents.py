"""Document import route: uploaded files -> extracted discovery fields."""

from fastapi import APIRouter, Depends

from ea_discovery.agent.gateway import ModelGateway, get_gateway
from ea_discovery.schemas.documents import AnalyzeDocumentsRequest, AnalyzeDocumentsResponse
from ea_discovery.services.document_analysis import DocumentAnalysisService

router = APIRouter()


@router.post("/analyze-documents", response_model=AnalyzeDocumentsResponse)
async def analyze_documents(
    request: AnalyzeDocumentsRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    """Extract discovery fields from uploaded documents.

    Raises (via the global handler):
        413: Total upload size over the configured ceiling (no model call made)
        400: No document could be processed
        429 / 502: Upstream rate limit, failure, or unrecoverable reply
    """
    return await DocumentAnalysisService(gateway).analyze(request.files)
