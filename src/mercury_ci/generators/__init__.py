"""Content generators and exporters for Mercury CI."""

from .briefing_generator import (
    DEFAULT_SOURCES,
    BriefingGenerator,
    format_long_date,
    parse_briefing_date,
)
from .content_source import RandomContentSource
from .exporter import (
    MIME_TYPES,
    AnalysisExporter,
    ExportedArtifact,
    FileExportSink,
    MemoryExportSink,
)
from .report_generator import DEFAULT_SECTIONS, ReportGenerator

__all__ = [
    "DEFAULT_SOURCES",
    "BriefingGenerator",
    "format_long_date",
    "parse_briefing_date",
    "RandomContentSource",
    "MIME_TYPES",
    "AnalysisExporter",
    "ExportedArtifact",
    "FileExportSink",
    "MemoryExportSink",
    "DEFAULT_SECTIONS",
    "ReportGenerator",
]
