"""Mercury CI pipeline facade.

Wires the store, collections, generators, content extractor and analysis
assembler together behind the operations the application exposes:
briefings, reports, file upload/analysis and exports.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Optional, Sequence, Tuple

from .analyzers.assembler import AnalysisAssembler, get_extension
from .analyzers.data_analysis import DataAnalyser, DataAnalysisToolResult
from .config.config_manager import ConfigurationManager, configure_logging
from .config.models import AppConfig, StorageBackend
from .exceptions import (
    AnalysisUnavailableError,
    InvalidTransitionError,
    NotFoundError,
    UnsupportedFileTypeError,
)
from .generators.briefing_generator import BriefingGenerator
from .generators.content_source import RandomContentSource
from .generators.exporter import MIME_TYPES, AnalysisExporter, FileExportSink, safe_filename
from .generators.report_generator import ReportGenerator
from .interfaces.extractor import IContentExtractor
from .interfaces.generator import IExportSink
from .interfaces.storage import IKeyValueStore
from .models.enums import FileStatus
from .models.records import StoredBriefing, StoredReport, UploadedFile
from .parsers.content_extractor import ContentExtractor
from .storage.collections import (
    BriefingArchive,
    BriefingCollection,
    FileCollection,
    ReportCollection,
)
from .storage.database import DatabaseManager
from .storage.kv_store import InMemoryKeyValueStore, SQLKeyValueStore


logger = logging.getLogger(__name__)

SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_file_size(size: int) -> str:
    """Human-readable size such as ``"2.4 MB"``."""
    if size <= 0:
        return "0 Bytes"
    index = 0
    while size >= 1024 ** (index + 1) and index < len(SIZE_UNITS) - 1:
        index += 1
    value = round(size / (1024 ** index), 2)
    return f"{value:g} {SIZE_UNITS[index]}"


@dataclass
class RejectedUpload:
    """A file refused by the batch upload."""
    name: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "reason": self.reason}


@dataclass
class UploadOutcome:
    """Result of a batch upload."""
    accepted: List[UploadedFile] = field(default_factory=list)
    rejected: List[RejectedUpload] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accepted": [f.to_dict() for f in self.accepted],
            "rejected": [r.to_dict() for r in self.rejected],
        }


@dataclass
class PipelineStats:
    """Statistics about pipeline activity."""
    briefings_generated: int = 0
    reports_generated: int = 0
    files_uploaded: int = 0
    files_rejected: int = 0
    analyses_completed: int = 0
    analyses_failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "briefingsGenerated": self.briefings_generated,
            "reportsGenerated": self.reports_generated,
            "filesUploaded": self.files_uploaded,
            "filesRejected": self.files_rejected,
            "analysesCompleted": self.analyses_completed,
            "analysesFailed": self.analyses_failed,
        }


class MercuryPipeline:
    """
    Main entry point for Mercury CI.

    All collections share one key-value store. File analysis runs off the
    event loop in a worker thread; there is no locking, so concurrent
    updates follow last-writer-wins on the stored blob.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        store: Optional[IKeyValueStore] = None,
        content_extractor: Optional[IContentExtractor] = None,
        assembler: Optional[AnalysisAssembler] = None,
        briefing_generator: Optional[BriefingGenerator] = None,
        report_generator: Optional[ReportGenerator] = None,
        exporter: Optional[AnalysisExporter] = None,
        export_sink: Optional[IExportSink] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Application configuration.
            store: Optional key-value store (created from config if not provided).
            content_extractor: Optional extractor for uploaded bytes.
            assembler: Optional analysis assembler.
            briefing_generator: Optional briefing generator.
            report_generator: Optional report generator.
            exporter: Optional analysis exporter.
            export_sink: Default sink for exports (a FileExportSink under
                ``config.export_dir`` when not provided).
        """
        self.config = config or AppConfig()
        self.stats = PipelineStats()

        self._db_manager: Optional[DatabaseManager] = None
        if store is None:
            store = self._create_store()
        self._store = store

        self._archive = BriefingArchive(store)
        self._briefings = BriefingCollection(store, archive=self._archive)
        self._reports = ReportCollection(store)
        self._files = FileCollection(store)

        self._extractor = content_extractor or ContentExtractor()
        self._assembler = assembler or AnalysisAssembler()
        self._briefing_generator = briefing_generator or BriefingGenerator(
            content_source=RandomContentSource(self.config.random_seed),
            default_sources=self.config.default_sources,
        )
        self._report_generator = report_generator or ReportGenerator()
        self._exporter = exporter or AnalysisExporter()
        self._data_analyser = DataAnalyser()
        self._export_sink = export_sink

        logger.info(
            f"Mercury pipeline initialized with {self.config.storage_backend.value} storage"
        )

    @classmethod
    def from_environment(cls) -> "MercuryPipeline":
        """Build a pipeline from ``MERCURY_*`` environment variables."""
        manager = ConfigurationManager()
        manager.load_from_env()
        configure_logging(manager.configuration.log_level)
        return cls(manager.configuration)

    def _create_store(self) -> IKeyValueStore:
        if self.config.storage_backend == StorageBackend.SQL:
            self._db_manager = DatabaseManager(database_url=self.config.database_url)
            return SQLKeyValueStore(self._db_manager)
        return InMemoryKeyValueStore()

    @property
    def store(self) -> IKeyValueStore:
        return self._store

    # =========================================================================
    # Briefings
    # =========================================================================

    def generate_briefing(
        self,
        briefing_date,
        company: Optional[str] = None,
        sources: Optional[Sequence[str]] = None,
    ) -> StoredBriefing:
        """Generate a briefing and store it at the front of the collection."""
        briefing = self._briefing_generator.generate(briefing_date, company, sources)
        self._briefings.save(briefing)
        self.stats.briefings_generated += 1
        return briefing

    def list_briefings(self) -> List[StoredBriefing]:
        return self._briefings.load()

    def list_archived_briefings(self) -> List[StoredBriefing]:
        return self._archive.load()

    def get_briefing(self, briefing_id: str) -> StoredBriefing:
        briefing = self._briefings.get(briefing_id) or self._archive.get(briefing_id)
        if briefing is None:
            raise NotFoundError(message=f"Briefing not found: {briefing_id}")
        return briefing

    def delete_briefing(self, briefing_id: str) -> None:
        if not (self._briefings.delete(briefing_id) or self._archive.delete(briefing_id)):
            raise NotFoundError(message=f"Briefing not found: {briefing_id}")

    # =========================================================================
    # Reports
    # =========================================================================

    def generate_report(
        self,
        report_type: str,
        sections: Optional[Sequence[str]] = None,
        file_id: Optional[str] = None,
        data: Any = None,
    ) -> StoredReport:
        """
        Generate and store a report.

        Args:
            report_type: Kind of report.
            sections: Optional section titles.
            file_id: Uploaded file whose analysis should be included.
            data: Analysis to include directly (ignored when file_id is given).

        Raises:
            NotFoundError: If file_id does not exist.
            AnalysisUnavailableError: If the file has not been analysed.
        """
        if file_id is not None:
            data = self._require_analysis(self.get_file(file_id))
        report = self._report_generator.generate(report_type, data=data, sections=sections)
        self._reports.save(report)
        self.stats.reports_generated += 1
        return report

    def list_reports(self) -> List[StoredReport]:
        return self._reports.load()

    def get_report(self, report_id: str) -> StoredReport:
        report = self._reports.get(report_id)
        if report is None:
            raise NotFoundError(message=f"Report not found: {report_id}")
        return report

    def delete_report(self, report_id: str) -> None:
        if not self._reports.delete(report_id):
            raise NotFoundError(message=f"Report not found: {report_id}")

    def export_report(self, report_id: str, sink: Optional[IExportSink] = None) -> str:
        """Render a stored report as Markdown and deliver it."""
        report = self.get_report(report_id)
        content = self._report_generator.render_markdown(report)
        filename = f"{safe_filename(report.title)}.md"
        return (sink or self._default_sink()).deliver(content, MIME_TYPES["md"], filename)

    # =========================================================================
    # Files
    # =========================================================================

    def validate_upload(self, name: str) -> str:
        """
        Check that a file name has a supported extension.

        Returns:
            The lower-case extension.

        Raises:
            UnsupportedFileTypeError: If the extension is not accepted.
        """
        extension = get_extension(name)
        if extension not in self.config.supported_extensions:
            raise UnsupportedFileTypeError(
                message=f"Unsupported file type: .{extension}" if extension
                else "File has no extension",
                file_name=name,
                details={"supported_extensions": list(self.config.supported_extensions)},
            )
        return extension

    def upload_file(self, name: str, data: bytes) -> UploadedFile:
        """
        Store an uploaded file with status ``uploaded``.

        Raises:
            UnsupportedFileTypeError: If the extension is not accepted; the
                collection is left unchanged.
        """
        extension = self.validate_upload(name)
        content = self._extractor.extract(data, extension, name)
        return self._store_upload(name, data, content)

    async def upload_files(
        self,
        files: Sequence[Tuple[str, bytes]],
        analyse: bool = False,
    ) -> UploadOutcome:
        """
        Upload several files concurrently.

        Unsupported files are reported in ``UploadOutcome.rejected`` rather
        than raised. With ``analyse=True`` each accepted file is analysed
        straight away.
        """
        outcome = UploadOutcome()

        async def upload_one(name: str, data: bytes) -> None:
            try:
                extension = self.validate_upload(name)
            except UnsupportedFileTypeError as e:
                logger.warning(f"Rejected upload {name}: {e.message}")
                self.stats.files_rejected += 1
                outcome.rejected.append(RejectedUpload(name=name, reason=e.message))
                return
            content = await asyncio.to_thread(self._extractor.extract, data, extension, name)
            uploaded = self._store_upload(name, data, content)
            if analyse:
                uploaded = await self.start_analysis(uploaded.id)
            outcome.accepted.append(uploaded)

        await asyncio.gather(*(upload_one(name, data) for name, data in files))
        return outcome

    def start_analysis(self, file_id: str) -> Awaitable[UploadedFile]:
        """
        Mark a file as ``analysing`` and return an awaitable for the result.

        The status change is persisted before this method returns; awaiting
        the result runs the assembler and settles the file as ``processed``
        or ``error``.

        Raises:
            NotFoundError: If the file does not exist.
            InvalidTransitionError: If the file is not in ``uploaded`` state.
        """
        uploaded = self.get_file(file_id)
        self._transition(uploaded, FileStatus.ANALYSING)
        self._files.replace(uploaded)
        logger.info(f"Started analysis of {uploaded.name}")
        return self._run_analysis(uploaded)

    async def analyse_file(self, file_id: str) -> UploadedFile:
        """Run the full analysis of an uploaded file."""
        return await self.start_analysis(file_id)

    async def _run_analysis(self, uploaded: UploadedFile) -> UploadedFile:
        try:
            result = await asyncio.to_thread(self._assembler.assemble, uploaded.name, uploaded.data)
        except Exception:
            logger.exception(f"Analysis failed for {uploaded.name}")
            self._transition(uploaded, FileStatus.ERROR)
            uploaded.analysis_result = None
            self.stats.analyses_failed += 1
        else:
            self._transition(uploaded, FileStatus.PROCESSED)
            uploaded.analysis_result = result
            uploaded.insights = len(result.key_findings)
            self.stats.analyses_completed += 1
            logger.info(f"Analysis of {uploaded.name} completed with {uploaded.insights} insights")

        if not self._files.replace(uploaded):
            logger.warning(f"File {uploaded.id} was removed before its analysis finished")
        return uploaded

    def list_files(self) -> List[UploadedFile]:
        return self._files.load()

    def get_file(self, file_id: str) -> UploadedFile:
        uploaded = self._files.get(file_id)
        if uploaded is None:
            raise NotFoundError(message=f"File not found: {file_id}")
        return uploaded

    def delete_file(self, file_id: str) -> None:
        if not self._files.delete(file_id):
            raise NotFoundError(message=f"File not found: {file_id}")

    # =========================================================================
    # Exports and tools
    # =========================================================================

    def export_analysis(
        self,
        file_id: str,
        fmt: str = "json",
        sink: Optional[IExportSink] = None,
    ) -> str:
        """
        Export a processed file's analysis as CSV or JSON.

        Raises:
            NotFoundError: If the file does not exist.
            AnalysisUnavailableError: If the file has not been analysed.
            ValueError: If the format is not supported.
        """
        uploaded = self.get_file(file_id)
        result = self._require_analysis(uploaded)
        base_name = f"{safe_filename(uploaded.name.rsplit('.', 1)[0])}_analysis"
        return self._exporter.export(result, fmt, sink or self._default_sink(), base_name)

    def analyse_data(
        self,
        csv_text: str,
        analysis_type: Optional[str] = None,
        focus_areas: Optional[List[str]] = None,
    ) -> DataAnalysisToolResult:
        return self._data_analyser.analyse(csv_text, analysis_type, focus_areas)

    def get_stats(self) -> PipelineStats:
        return self.stats

    def close(self) -> None:
        if self._db_manager is not None:
            self._db_manager.close()
        logger.info("Mercury pipeline closed")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _store_upload(self, name: str, data: bytes, content: str) -> UploadedFile:
        uploaded = UploadedFile(
            id=uuid.uuid4().hex,
            name=name,
            size=format_file_size(len(data)),
            data=content,
        )
        self._files.save(uploaded)
        self.stats.files_uploaded += 1
        logger.info(f"Uploaded {name} ({uploaded.size})")
        return uploaded

    def _transition(self, uploaded: UploadedFile, target: FileStatus) -> None:
        if not uploaded.status.can_transition_to(target):
            raise InvalidTransitionError(
                message=(
                    f"Cannot move file from '{uploaded.status.value}' to '{target.value}'"
                ),
                file_name=uploaded.name,
                details={"current": uploaded.status.value, "target": target.value},
            )
        uploaded.status = target

    def _require_analysis(self, uploaded: UploadedFile):
        if uploaded.status != FileStatus.PROCESSED or uploaded.analysis_result is None:
            raise AnalysisUnavailableError(
                message="File has not been analysed",
                file_name=uploaded.name,
                details={"status": uploaded.status.value},
            )
        return uploaded.analysis_result

    def _default_sink(self) -> IExportSink:
        if self._export_sink is None:
            self._export_sink = FileExportSink(self.config.export_dir)
        return self._export_sink
