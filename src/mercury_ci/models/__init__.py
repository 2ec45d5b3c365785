"""Data models and enums for Mercury CI."""

from .enums import (
    ColumnType,
    DataDomain,
    DataQuality,
    EntityKind,
    FileStatus,
    SourceType,
)
from .analysis import (
    AnalysisResult,
    ColumnProfile,
    CSVProfile,
    EntityMap,
    NumericStats,
    TextStats,
    Visualisation,
    empty_entity_map,
    entities_from_dict,
    entities_to_dict,
)
from .records import (
    Kpi,
    ReportMetadata,
    ReportSection,
    StoredBriefing,
    StoredReport,
    UploadedFile,
)

__all__ = [
    # Enums
    "ColumnType",
    "DataDomain",
    "DataQuality",
    "EntityKind",
    "FileStatus",
    "SourceType",
    # Analysis models
    "AnalysisResult",
    "ColumnProfile",
    "CSVProfile",
    "EntityMap",
    "NumericStats",
    "TextStats",
    "Visualisation",
    "empty_entity_map",
    "entities_from_dict",
    "entities_to_dict",
    # Stored records
    "Kpi",
    "ReportMetadata",
    "ReportSection",
    "StoredBriefing",
    "StoredReport",
    "UploadedFile",
]
