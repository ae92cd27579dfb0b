"""Document Text Extractor.

Turns an uploaded document into a model content block:
- PDF  -> extracted text via PyPDF2 (ignored when 20 chars or fewer)
- DOCX -> paragraph text via python-docx
- text/* or .txt -> UTF-8 decoded text
- anything else, or any extraction failure -> the raw base64 document block

Extraction failures are recovered here; only undecodable payloads mark a
document as errored and drop it from the batch.
"""

import asyncio
import base64
import binascii
import io

import docx
import PyPDF2
import structlog

from ea_discovery.core.exceptions import DocumentExtractionError, NoUsableDocumentsError
from ea_discovery.schemas.documents import ProcessingStatus, UploadedDocument

logger = structlog.get_logger(__name__)

ACCEPTED_EXTENSIONS = (".pdf", ".docx", ".doc", ".pptx", ".ppt", ".xlsx", ".xls", ".txt")
MIN_EXTRACTED_PDF_CHARS = 20
PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
FALLBACK_MEDIA_TYPE = "application/octet-stream"


def is_accepted(filename: str) -> bool:
    return filename.lower().endswith(ACCEPTED_EXTENSIONS)


def decode_payload(document: UploadedDocument) -> bytes:
    if not document.base64_data:
        raise DocumentExtractionError(document.name, "empty payload")
    try:
        return base64.b64decode(document.base64_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DocumentExtractionError(document.name, f"invalid base64 ({e})") from e


def _pdf_text(filename: str, raw: bytes) -> str:
    try:
        reader = PyPDF2.PdfReader(io.BytesIO(raw))
        return "\n".join(page.extract_text() or "" for page in reader.pages).strip()
    except Exception as e:
        raise DocumentExtractionError(filename, str(e)) from e


def _docx_text(filename: str, raw: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(raw))
        return "\n".join(paragraph.text for paragraph in document.paragraphs).strip()
    except Exception as e:
        raise DocumentExtractionError(filename, str(e)) from e


def extract_text(filename: str, media_type: str, raw: bytes) -> tuple[str, str] | None:
    """Return ``(kind, text)`` for extractable formats, ``None`` to send raw bytes.

    Raises:
        DocumentExtractionError: If the parser fails on the payload
    """
    lower = (filename or "").lower()
    media = (media_type or "").lower()

    if lower.endswith(".pdf") or media == PDF_MEDIA_TYPE:
        text = _pdf_text(filename, raw)
        return ("pdf", text) if len(text) > MIN_EXTRACTED_PDF_CHARS else None

    if lower.endswith(".docx") or media == DOCX_MEDIA_TYPE:
        text = _docx_text(filename, raw)
        return ("docx", text) if text else None

    if media.startswith("text/") or lower.endswith(".txt"):
        return ("text", raw.decode("utf-8", errors="replace"))

    return None


def document_block(document: UploadedDocument) -> dict:
    return {
        "type": "document",
        "source": {
            "type": "base64",
            "media_type": document.type or FALLBACK_MEDIA_TYPE,
            "data": document.base64_data,
        },
    }


def text_block(filename: str, kind: str, text: str) -> dict:
    if kind == "text":
        body = f"--- Begin text file {filename} ---\n{text}\n--- End text file ---"
    else:
        body = f"--- Begin extracted text from {filename} ---\n{text}\n--- End extracted text ---"
    return {"type": "text", "text": body}


def to_content_block(document: UploadedDocument) -> dict:
    """Build the content block for one document.

    Raises:
        DocumentExtractionError: Only when the payload itself cannot be decoded
    """
    raw = decode_payload(document)
    try:
        extracted = extract_text(document.name, document.type, raw)
    except DocumentExtractionError as e:
        logger.warning("document_extraction_failed", filename=document.name, error=str(e))
        extracted = None

    if extracted is None:
        return document_block(document)
    kind, text = extracted
    return text_block(document.name, kind, text)


async def prepare_documents(documents: list[UploadedDocument]) -> list[dict]:
    """Convert a batch concurrently.

    Every document moves to ``processing``; undecodable ones move to ``error``.
    The caller marks the rest ``complete`` once analysis succeeds.

    Returns:
        Content blocks for the documents that could be processed, in upload order

    Raises:
        NoUsableDocumentsError: If no document could be processed
    """
    for document in documents:
        document.status = ProcessingStatus.PROCESSING

    results = await asyncio.gather(
        *(asyncio.to_thread(to_content_block, document) for document in documents),
        return_exceptions=True,
    )

    blocks: list[dict] = []
    for document, result in zip(documents, results):
        if isinstance(result, DocumentExtractionError):
            document.status = ProcessingStatus.ERROR
            document.error = "Failed to process file"
            logger.warning("document_processing_failed", filename=document.name, error=str(result))
            continue
        if isinstance(result, BaseException):
            raise result
        blocks.append(result)

    if not blocks:
        raise NoUsableDocumentsError("No files could be processed")
    return blocks
