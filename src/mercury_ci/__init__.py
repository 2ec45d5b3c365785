"""
Mercury CI

A business-intelligence back end: daily market briefings, analysis of
uploaded CSV, text and document files, and generated reports.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import (
    ColumnType,
    DataDomain,
    DataQuality,
    EntityKind,
    FileStatus,
    SourceType,
)
from .models.analysis import AnalysisResult, CSVProfile, EntityMap, TextStats
from .models.records import Kpi, StoredBriefing, StoredReport, UploadedFile
from .extractors import DocumentClassifier, EntityExtractor
from .analyzers import AnalysisAssembler, CSVProfiler, DataAnalysisToolResult, analyse_data
from .generators import (
    AnalysisExporter,
    BriefingGenerator,
    FileExportSink,
    MemoryExportSink,
    RandomContentSource,
    ReportGenerator,
)
from .storage import (
    BriefingArchive,
    BriefingCollection,
    DatabaseManager,
    FileCollection,
    InMemoryKeyValueStore,
    ReportCollection,
    SQLKeyValueStore,
)
from .config import (
    AppConfig,
    ConfigurationError,
    ConfigurationManager,
    StorageBackend,
    ValidationResult,
    configure_logging,
)
from .exceptions import (
    AnalysisUnavailableError,
    ExtractionError,
    InvalidTransitionError,
    MercuryError,
    NotFoundError,
    StorageError,
    UnsupportedFileTypeError,
)
from .pipeline import MercuryPipeline, PipelineStats, UploadOutcome, format_file_size

__all__ = [
    "ColumnType",
    "DataDomain",
    "DataQuality",
    "EntityKind",
    "FileStatus",
    "SourceType",
    "AnalysisResult",
    "CSVProfile",
    "EntityMap",
    "TextStats",
    "Kpi",
    "StoredBriefing",
    "StoredReport",
    "UploadedFile",
    "DocumentClassifier",
    "EntityExtractor",
    "AnalysisAssembler",
    "CSVProfiler",
    "DataAnalysisToolResult",
    "analyse_data",
    "AnalysisExporter",
    "BriefingGenerator",
    "FileExportSink",
    "MemoryExportSink",
    "RandomContentSource",
    "ReportGenerator",
    "BriefingArchive",
    "BriefingCollection",
    "DatabaseManager",
    "FileCollection",
    "InMemoryKeyValueStore",
    "ReportCollection",
    "SQLKeyValueStore",
    "AppConfig",
    "ConfigurationError",
    "ConfigurationManager",
    "StorageBackend",
    "ValidationResult",
    "configure_logging",
    "AnalysisUnavailableError",
    "ExtractionError",
    "InvalidTransitionError",
    "MercuryError",
    "NotFoundError",
    "StorageError",
    "UnsupportedFileTypeError",
    "MercuryPipeline",
    "PipelineStats",
    "UploadOutcome",
    "format_file_size",
]
