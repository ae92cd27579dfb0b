"""EngagementWorkspace: the page-level state machine behind the discovery UI.

Views: home -> discovery -> artifacts. The workspace owns the engagement being
edited plus a cached list of saved engagements. The cache is never patched
locally; it is re-fetched from the store after every create, update or delete.
Failures become error notifications and leave in-memory state untouched.
"""

import uuid
from dataclasses import dataclass
from enum import StrEnum

import structlog

from ea_discovery.artifacts.exporter import diagram_filename, export_filename, render_export
from ea_discovery.artifacts.generator import ArtifactGenerator
from ea_discovery.core.exceptions import EADiscoveryError, PersistenceError
from ea_discovery.diagrams import DiagramKind, render_diagram
from ea_discovery.schemas.artifacts import ArtifactBundle
from ea_discovery.schemas.discovery import DiscoveryRecord, merge_extracted
from ea_discovery.schemas.documents import AnalyzeDocumentsResponse, UploadedDocument
from ea_discovery.schemas.engagements import DISCOVERY_FIELDS, EngagementRecord
from ea_discovery.services.document_analysis import DocumentAnalysisService
from ea_discovery.services.engagement_store import EngagementStore

logger = structlog.get_logger(__name__)


class View(StrEnum):
    HOME = "home"
    DISCOVERY = "discovery"
    ARTIFACTS = "artifacts"


class NotificationKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    message: str
    kind: NotificationKind = NotificationKind.SUCCESS


@dataclass
class DownloadFile:
    filename: str
    media_type: str
    content: str


class EngagementWorkspace:
    def __init__(
        self,
        store: EngagementStore,
        generator: ArtifactGenerator,
        analyzer: DocumentAnalysisService,
    ):
        self.store = store
        self.generator = generator
        self.analyzer = analyzer

        self.view = View.HOME
        self.engagements: list[EngagementRecord] = []
        self.current_id: str | None = None
        self.discovery = DiscoveryRecord()
        self.artifacts: ArtifactBundle | None = None
        self.notification: Notification | None = None
        self.loading = False

    def notify(self, message: str, kind: NotificationKind = NotificationKind.SUCCESS) -> None:
        self.notification = Notification(message, kind)
        log = logger.error if kind == NotificationKind.ERROR else logger.info
        log("workspace_notification", message=message, kind=kind.value)

    def go_home(self) -> None:
        self.view = View.HOME

    def edit_discovery(self) -> None:
        self.view = View.DISCOVERY

    def start_new(self) -> None:
        self.current_id = None
        self.discovery = DiscoveryRecord()
        self.artifacts = None
        self.view = View.DISCOVERY

    def open_engagement(self, engagement_id: str) -> bool:
        """Load a cached engagement; artifacts view if it has artifacts, else discovery."""
        record = next((e for e in self.engagements if e.id == engagement_id), None)
        if record is None:
            self.notify("Engagement not found", NotificationKind.ERROR)
            return False
        self.current_id = record.id
        self.discovery = record.discovery()
        self.artifacts = record.artifacts
        self.view = View.ARTIFACTS if record.artifacts is not None else View.DISCOVERY
        return True

    def update_field(self, field: str, value: str) -> None:
        if field not in DISCOVERY_FIELDS:
            raise ValueError(f"Unknown discovery field: {field}")
        self.discovery = self.discovery.model_copy(update={field: value})

    async def refresh(self) -> bool:
        try:
            self.engagements = await self.store.list_engagements()
        except PersistenceError:
            self.notify("Failed to load engagements", NotificationKind.ERROR)
            return False
        return True

    async def save(self) -> bool:
        """Upsert the current engagement, minting its id on first save."""
        if self.current_id is None:
            self.current_id = str(uuid.uuid4())
        record = EngagementRecord.from_discovery(self.discovery, self.artifacts, engagement_id=self.current_id)
        try:
            await self.store.upsert(record)
        except PersistenceError:
            self.notify("Failed to save engagement", NotificationKind.ERROR)
            return False
        await self.refresh()
        self.notify("Engagement saved!")
        return True

    async def delete(self, engagement_id: str) -> bool:
        try:
            await self.store.delete(engagement_id)
        except PersistenceError:
            self.notify("Failed to delete engagement", NotificationKind.ERROR)
            return False
        if engagement_id == self.current_id:
            self.start_new()
            self.go_home()
        await self.refresh()
        self.notify("Engagement deleted")
        return True

    async def import_documents(self, documents: list[UploadedDocument]) -> AnalyzeDocumentsResponse | None:
        """Analyze documents and merge the extracted fields into the current record."""
        self.loading = True
        try:
            result = await self.analyzer.analyze(documents)
        except EADiscoveryError as e:
            self.notify(f"Failed: {e}", NotificationKind.ERROR)
            return None
        finally:
            self.loading = False

        self.discovery = merge_extracted(self.discovery, result.extracted_data)
        self.notify("Discovery data imported and merged successfully! Review and edit as needed.")
        return result

    async def generate_artifacts(self) -> bool:
        """Generate the artifact bundle, auto-save, then switch to the artifacts view."""
        self.loading = True
        try:
            self.artifacts = await self.generator.generate(self.discovery)
        except EADiscoveryError as e:
            self.notify(f"Failed: {e}", NotificationKind.ERROR)
            return False
        finally:
            self.loading = False

        saved = await self.save()
        self.view = View.ARTIFACTS
        if saved:
            self.notify("Artifacts generated!")
        return True

    def export(self) -> DownloadFile:
        return DownloadFile(
            filename=export_filename(self.discovery.company_name),
            media_type="application/json",
            content=render_export(self.discovery, self.artifacts),
        )

    def download_diagram(self, kind: DiagramKind) -> DownloadFile | None:
        """Render one diagram; None when its section is absent."""
        svg = render_diagram(kind, self.artifacts, self.discovery)
        if not svg:
            return None
        filename = diagram_filename(self.discovery.company_name, kind.value)
        self.notify(f"Downloaded {filename}!")
        return DownloadFile(filename=filename, media_type="image/svg+xml", content=svg)
