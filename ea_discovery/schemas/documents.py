"""Pydantic schemas for document upload and analysis."""

from enum import StrEnum
from typing import Annotated, Any
from uuid import uuid4

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ea_discovery.schemas.discovery import DiscoveryRecord
from ea_discovery.schemas.labels import as_list

AnyList = Annotated[list[Any], BeforeValidator(as_list)]


class ProcessingStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


class UploadedDocument(BaseModel):
    """A file selected for import, carried as base64 like the browser FileReader output."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    type: str = Field("", description="Declared media type")
    base64_data: str = ""
    status: ProcessingStatus = ProcessingStatus.PENDING
    error: str | None = None


class AnalyzeDocumentsRequest(BaseModel):
    files: list[UploadedDocument] = Field(default_factory=list)


class ExtractedDiscovery(DiscoveryRecord):
    """Discovery fields pulled from documents, plus traceability extras."""

    systems: AnyList = Field(default_factory=list)
    manufacturing_processes: AnyList = Field(default_factory=list)
    explicit_capabilities: AnyList = Field(default_factory=list)
    document_summaries: AnyList = Field(default_factory=list)


class DocumentStatusResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    status: ProcessingStatus
    error: str | None = None


class AnalyzeDocumentsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    extracted_data: ExtractedDiscovery
    documents: list[DocumentStatusResponse]
