"""Stored record models: briefings, reports and uploaded files."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .analysis import AnalysisResult
from .enums import FileStatus
from .timestamps import now_iso


@dataclass
class Kpi:
    """A single key performance indicator shown on a briefing."""
    metric: str
    value: str
    change: str
    trend: str

    def to_dict(self) -> Dict[str, str]:
        return {"metric": self.metric, "value": self.value, "change": self.change, "trend": self.trend}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Kpi":
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for Kpi")
        return cls(
            metric=data.get("metric", ""),
            value=data.get("value", ""),
            change=data.get("change", ""),
            trend=data.get("trend", ""),
        )


@dataclass
class StoredBriefing:
    """
    A dated intelligence briefing.

    ``archived_at`` is only set once the briefing has been evicted from the
    active collection into the archive.
    """
    id: str
    date: str
    briefing: str
    title: str
    company: Optional[str] = None
    sources: List[str] = field(default_factory=list)
    kpis: List[Kpi] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    generated_at: str = field(default_factory=now_iso)
    archived_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "date": self.date,
            "company": self.company,
            "sources": list(self.sources),
            "briefing": self.briefing,
            "kpis": [k.to_dict() for k in self.kpis],
            "insights": list(self.insights),
            "generatedAt": self.generated_at,
            "title": self.title,
        }
        if self.archived_at is not None:
            data["archivedAt"] = self.archived_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredBriefing":
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for StoredBriefing")
        for required in ("id", "date", "briefing"):
            if required not in data:
                raise ValueError(f"Missing required field '{required}' in StoredBriefing")
        return cls(
            id=data["id"],
            date=data["date"],
            briefing=data["briefing"],
            title=data.get("title", ""),
            company=data.get("company"),
            sources=list(data.get("sources", [])),
            kpis=[Kpi.from_dict(k) for k in data.get("kpis", [])],
            insights=list(data.get("insights", [])),
            generated_at=data.get("generatedAt", ""),
            archived_at=data.get("archivedAt"),
        )


@dataclass
class ReportSection:
    """One titled section of a report."""
    title: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "content": self.content}


@dataclass
class ReportMetadata:
    """Provenance details attached to a report."""
    generated_at: str
    report_type: str
    data_sources: List[str] = field(default_factory=list)
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "reportType": self.report_type,
            "dataSources": list(self.data_sources),
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportMetadata":
        return cls(
            generated_at=data.get("generatedAt", ""),
            report_type=data.get("reportType", ""),
            data_sources=list(data.get("dataSources", [])),
            confidence=data.get("confidence", 0.0),
        )


@dataclass
class StoredReport:
    """A multi-section business-intelligence report."""
    id: str
    report_type: str
    title: str
    executive_summary: str
    sections: List[ReportSection] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    metadata: Optional[ReportMetadata] = None
    generated_at: str = field(default_factory=now_iso)

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = ReportMetadata(
                generated_at=self.generated_at, report_type=self.report_type
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "reportType": self.report_type,
            "title": self.title,
            "executiveSummary": self.executive_summary,
            "sections": [s.to_dict() for s in self.sections],
            "recommendations": list(self.recommendations),
            "metadata": self.metadata.to_dict(),
            "generatedAt": self.generated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredReport":
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for StoredReport")
        if "id" not in data:
            raise ValueError("Missing required field 'id' in StoredReport")
        metadata = data.get("metadata")
        return cls(
            id=data["id"],
            report_type=data.get("reportType", ""),
            title=data.get("title", ""),
            executive_summary=data.get("executiveSummary", ""),
            sections=[
                ReportSection(title=s.get("title", ""), content=s.get("content", ""))
                for s in data.get("sections", [])
            ],
            recommendations=list(data.get("recommendations", [])),
            metadata=ReportMetadata.from_dict(metadata) if metadata else None,
            generated_at=data.get("generatedAt", ""),
        )


@dataclass
class UploadedFile:
    """
    A file uploaded for analysis.

    ``data`` holds the extracted text (or an error-marker string when the
    content could not be read). ``analysis_result`` is only present once the
    file reached ``FileStatus.PROCESSED``.
    """
    id: str
    name: str
    size: str
    data: str = ""
    status: FileStatus = FileStatus.UPLOADED
    insights: int = 0
    analysis_result: Optional[AnalysisResult] = None
    uploaded_at: str = field(default_factory=now_iso)

    @property
    def extension(self) -> str:
        _, _, ext = self.name.rpartition(".")
        return ext.lower() if "." in self.name else ""

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "status": self.status.value,
            "insights": self.insights,
            "data": self.data,
            "uploadedAt": self.uploaded_at,
        }
        if self.analysis_result is not None:
            data["analysisResult"] = self.analysis_result.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UploadedFile":
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for UploadedFile")
        for required in ("id", "name"):
            if required not in data:
                raise ValueError(f"Missing required field '{required}' in UploadedFile")
        analysis = data.get("analysisResult")
        return cls(
            id=data["id"],
            name=data["name"],
            size=data.get("size", ""),
            data=data.get("data", ""),
            status=FileStatus(data.get("status", FileStatus.UPLOADED.value)),
            insights=data.get("insights", 0),
            analysis_result=AnalysisResult.from_dict(analysis) if analysis else None,
            uploaded_at=data.get("uploadedAt", ""),
        )
