"""Tests for document text extraction and content block building."""

import base64
import io

import docx
import pytest
import PyPDF2

from ea_discovery.core.exceptions import DocumentExtractionError, NoUsableDocumentsError
from ea_discovery.documents import extractor
from ea_discovery.documents.extractor import (
    extract_text,
    is_accepted,
    prepare_documents,
    to_content_block,
)
from ea_discovery.schemas.documents import ProcessingStatus, UploadedDocument

pytestmark = pytest.mark.unit


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode()


def _docx_bytes(*paragraphs: str) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _blank_pdf_bytes() -> bytes:
    writer = PyPDF2.PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def _doc(name: str, media_type: str, raw: bytes) -> UploadedDocument:
    return UploadedDocument(name=name, type=media_type, base64_data=_b64(raw))


class TestAcceptedExtensions:
    @pytest.mark.parametrize("name", ["rfp.pdf", "Notes.DOCX", "deck.pptx", "plan.xlsx", "readme.txt", "old.doc"])
    def test_accepted(self, name):
        assert is_accepted(name)

    @pytest.mark.parametrize("name", ["photo.png", "archive.zip", "script.py", "noext"])
    def test_rejected(self, name):
        assert not is_accepted(name)


class TestExtractText:
    def test_plain_text_decoded(self):
        assert extract_text("notes.txt", "text/plain", "Plant: Ohio".encode()) == ("text", "Plant: Ohio")

    def test_text_media_type_without_extension(self):
        assert extract_text("notes", "text/markdown", b"# Title") == ("text", "# Title")

    def test_invalid_utf8_replaced(self):
        kind, text = extract_text("notes.txt", "text/plain", b"caf\xe9")
        assert kind == "text"
        assert text.startswith("caf")

    def test_docx_paragraphs(self):
        raw = _docx_bytes("Acme Manufacturing", "Runs SAP ECC")
        assert extract_text("discovery.docx", "", raw) == ("docx", "Acme Manufacturing\nRuns SAP ECC")

    def test_pdf_without_enough_text_sends_raw(self):
        assert extract_text("scan.pdf", "application/pdf", _blank_pdf_bytes()) is None

    def test_pdf_with_text(self, monkeypatch):
        monkeypatch.setattr(extractor, "_pdf_text", lambda filename, raw: "A" * 21)
        assert extract_text("rfp.pdf", "application/pdf", b"%PDF") == ("pdf", "A" * 21)

    def test_pdf_text_at_threshold_is_ignored(self, monkeypatch):
        monkeypatch.setattr(extractor, "_pdf_text", lambda filename, raw: "A" * 20)
        assert extract_text("rfp.pdf", "application/pdf", b"%PDF") is None

    def test_corrupt_pdf_raises_extraction_error(self):
        with pytest.raises(DocumentExtractionError, match="rfp.pdf"):
            extract_text("rfp.pdf", "application/pdf", b"not a pdf at all")

    def test_other_formats_send_raw(self):
        assert extract_text("deck.pptx", "application/vnd.ms-powerpoint", b"PK\x03\x04") is None


class TestToContentBlock:
    def test_text_file_markers(self):
        block = to_content_block(_doc("notes.txt", "text/plain", b"hello"))
        assert block == {"type": "text", "text": "--- Begin text file notes.txt ---\nhello\n--- End text file ---"}

    def test_extracted_docx_markers(self):
        block = to_content_block(_doc("d.docx", "", _docx_bytes("Body text")))
        assert block["text"] == "--- Begin extracted text from d.docx ---\nBody text\n--- End extracted text ---"

    def test_extraction_failure_falls_back_to_raw_document(self):
        document = _doc("broken.pdf", "application/pdf", b"garbage bytes")
        block = to_content_block(document)
        assert block == {
            "type": "document",
            "source": {"type": "base64", "media_type": "application/pdf", "data": document.base64_data},
        }

    def test_missing_media_type_defaults(self):
        block = to_content_block(_doc("sheet.xlsx", "", b"PK\x03\x04"))
        assert block["source"]["media_type"] == "application/octet-stream"

    def test_undecodable_payload_raises(self):
        with pytest.raises(DocumentExtractionError):
            to_content_block(UploadedDocument(name="x.txt", type="text/plain", base64_data="%%%not-base64%%%"))


class TestPrepareDocuments:
    async def test_blocks_in_upload_order(self):
        docs = [
            _doc("a.txt", "text/plain", b"first"),
            _doc("b.pptx", "", b"PK\x03\x04"),
            _doc("c.txt", "text/plain", b"third"),
        ]

        blocks = await prepare_documents(docs)

        assert [b["type"] for b in blocks] == ["text", "document", "text"]
        assert "first" in blocks[0]["text"]
        assert "third" in blocks[2]["text"]
        assert all(d.status == ProcessingStatus.PROCESSING for d in docs)

    async def test_partial_failure_keeps_the_rest(self):
        good = _doc("a.txt", "text/plain", b"ok")
        bad = UploadedDocument(name="b.txt", type="text/plain", base64_data="***")

        blocks = await prepare_documents([good, bad])

        assert len(blocks) == 1
        assert good.status == ProcessingStatus.PROCESSING
        assert bad.status == ProcessingStatus.ERROR
        assert bad.error == "Failed to process file"

    async def test_nothing_usable_raises(self):
        docs = [UploadedDocument(name="a.txt", base64_data=""), UploadedDocument(name="b.txt", base64_data="***")]

        with pytest.raises(NoUsableDocumentsError, match="No files could be processed"):
            await prepare_documents(docs)

        assert all(d.status == ProcessingStatus.ERROR for d in docs)
