"""Analysis result data models for Mercury CI."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import ColumnType, DataQuality, EntityKind, SourceType
from .timestamps import now_iso


EntityMap = Dict[EntityKind, List[str]]


def empty_entity_map() -> EntityMap:
    """Return an entity map with every kind present and empty."""
    return {kind: [] for kind in EntityKind}


def entities_to_dict(entities: EntityMap) -> Dict[str, List[str]]:
    """Convert an entity map to its serialized (plural key) form."""
    return {kind.plural: list(entities.get(kind, [])) for kind in EntityKind}


def entities_from_dict(data: Optional[Dict[str, List[str]]]) -> EntityMap:
    """Rebuild an entity map; unknown keys are ignored, missing kinds empty."""
    entities = empty_entity_map()
    for key, values in (data or {}).items():
        try:
            kind = EntityKind.from_plural(key)
        except ValueError:
            continue
        entities[kind] = list(values or [])
    return entities


@dataclass
class TextStats:
    """Basic size statistics of a piece of text."""
    word_count: int = 0
    line_count: int = 0
    paragraph_count: int = 0
    pages_hint: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "wordCount": self.word_count,
            "lineCount": self.line_count,
            "paragraphCount": self.paragraph_count,
            "pagesHint": self.pages_hint,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TextStats":
        data = data or {}
        return cls(
            word_count=data.get("wordCount", 0),
            line_count=data.get("lineCount", 0),
            paragraph_count=data.get("paragraphCount", 0),
            pages_hint=data.get("pagesHint", 0),
        )


@dataclass
class Visualisation:
    """A suggested chart for an analysis result."""
    type: str
    title: str
    description: str
    icon: str = ""
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Visualisation":
        return cls(
            type=data.get("type", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            icon=data.get("icon", ""),
            data=data.get("data"),
        )


@dataclass
class NumericStats:
    """Statistics over the parseable values of a numeric column."""
    min: float
    max: float
    mean: float
    count: int

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max, "mean": self.mean, "count": self.count}


@dataclass
class ColumnProfile:
    """
    Inferred type and statistics for one CSV column.

    ``key`` is unique within a profile; it equals ``name`` unless the
    header repeats an earlier one.
    """
    name: str
    column_type: ColumnType
    non_empty_count: int = 0
    stats: Optional[NumericStats] = None
    index: int = 0
    key: str = ""

    def __post_init__(self):
        if not self.key:
            self.key = self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "key": self.key,
            "index": self.index,
            "type": self.column_type.value,
            "nonEmptyCount": self.non_empty_count,
            "stats": self.stats.to_dict() if self.stats else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnProfile":
        stats = data.get("stats")
        return cls(
            name=data["name"],
            column_type=ColumnType(data.get("type", ColumnType.TEXT.value)),
            non_empty_count=data.get("nonEmptyCount", 0),
            stats=NumericStats(**stats) if stats else None,
            index=data.get("index", 0),
            key=data.get("key", ""),
        )


@dataclass
class CSVProfile:
    """
    Result of profiling CSV text.

    ``column_types`` and ``columns`` are parallel to ``headers``.
    ``numeric_stats``, ``numeric_columns`` and ``date_columns`` use column
    keys, so repeated headers stay distinct.
    """
    headers: List[str] = field(default_factory=list)
    row_count: int = 0
    column_types: List[ColumnType] = field(default_factory=list)
    numeric_stats: Dict[str, NumericStats] = field(default_factory=dict)
    domain: str = "general"
    columns: List[ColumnProfile] = field(default_factory=list)

    @property
    def numeric_columns(self) -> List[str]:
        return [c.key for c in self.columns if c.column_type == ColumnType.NUMERIC]

    @property
    def date_columns(self) -> List[str]:
        return [c.key for c in self.columns if c.column_type == ColumnType.DATE]

    def column(self, key: str) -> Optional[ColumnProfile]:
        for column in self.columns:
            if column.key == key:
                return column
        return None


@dataclass
class AnalysisResult:
    """
    Uniform analysis record produced for every uploaded file or CSV.

    ``key_findings`` and ``recommendations`` are never empty once the
    assembler has produced the result.
    """
    doc_type: str = "Document"
    issuer: Optional[str] = None
    recipient: Optional[str] = None
    title: Optional[str] = None
    stats: TextStats = field(default_factory=TextStats)
    entities: EntityMap = field(default_factory=empty_entity_map)
    summary: str = ""
    key_findings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    visualisations: List[Visualisation] = field(default_factory=list)
    confidence: float = 0.0
    data_quality: DataQuality = DataQuality.LOW
    processed_rows: int = 0
    source_type: SourceType = SourceType.TEXT
    domain: Optional[str] = None
    columns: List[ColumnProfile] = field(default_factory=list)
    generated_at: str = field(default_factory=now_iso)

    def __post_init__(self):
        if self.entities is None:
            self.entities = empty_entity_map()
        for kind in EntityKind:
            self.entities.setdefault(kind, [])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase dictionary used for persistence."""
        return {
            "docType": self.doc_type,
            "issuer": self.issuer,
            "recipient": self.recipient,
            "title": self.title,
            "stats": self.stats.to_dict(),
            "entities": entities_to_dict(self.entities),
            "summary": self.summary,
            "keyFindings": list(self.key_findings),
            "recommendations": list(self.recommendations),
            "visualisations": [v.to_dict() for v in self.visualisations],
            "confidence": self.confidence,
            "dataQuality": self.data_quality.value,
            "processedRows": self.processed_rows,
            "sourceType": self.source_type.value,
            "domain": self.domain,
            "columns": [c.to_dict() for c in self.columns],
            "generatedAt": self.generated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Rebuild an AnalysisResult from its persisted dictionary."""
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for AnalysisResult")
        return cls(
            doc_type=data.get("docType", "Document"),
            issuer=data.get("issuer"),
            recipient=data.get("recipient"),
            title=data.get("title"),
            stats=TextStats.from_dict(data.get("stats")),
            entities=entities_from_dict(data.get("entities")),
            summary=data.get("summary", ""),
            key_findings=list(data.get("keyFindings", [])),
            recommendations=list(data.get("recommendations", [])),
            visualisations=[Visualisation.from_dict(v) for v in data.get("visualisations", [])],
            confidence=data.get("confidence", 0.0),
            data_quality=DataQuality(data.get("dataQuality", DataQuality.LOW.value)),
            processed_rows=data.get("processedRows", 0),
            source_type=SourceType(data.get("sourceType", SourceType.TEXT.value)),
            domain=data.get("domain"),
            columns=[ColumnProfile.from_dict(c) for c in data.get("columns", [])],
            generated_at=data.get("generatedAt", ""),
        )
