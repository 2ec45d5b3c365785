"""Export of analysis results as downloadable CSV or JSON artifacts."""

import csv
import io
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ..interfaces.generator import IExportSink
from ..models.analysis import AnalysisResult
from ..models.timestamps import now_iso


logger = logging.getLogger(__name__)

MIME_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
    "md": "text/markdown",
}

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(name: str) -> str:
    """Replace characters that are unsafe in file names with underscores."""
    cleaned = _UNSAFE_FILENAME.sub("_", name).strip("._")
    return cleaned or "export"


class FileExportSink(IExportSink):
    """Writes artifacts into an output directory."""

    def __init__(self, output_dir: str = "data/exports"):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def deliver(self, content: str, mime_type: str, filename: str) -> str:
        path = self.output_dir / safe_filename(filename)
        path.write_text(content, encoding="utf-8")
        logger.info(f"Exported {mime_type} artifact to: {path}")
        return str(path)


@dataclass
class ExportedArtifact:
    """An artifact held by MemoryExportSink."""
    filename: str
    mime_type: str
    content: str
    created_at: str = field(default_factory=now_iso)


class MemoryExportSink(IExportSink):
    """Keeps artifacts in memory; used by the HTTP layer and tests."""

    def __init__(self):
        self.artifacts: List[ExportedArtifact] = []

    def deliver(self, content: str, mime_type: str, filename: str) -> str:
        self.artifacts.append(ExportedArtifact(filename, mime_type, content))
        return f"memory://{filename}"

    @property
    def last(self) -> ExportedArtifact:
        if not self.artifacts:
            raise LookupError("No artifacts have been delivered")
        return self.artifacts[-1]


class AnalysisExporter:
    """
    Formats AnalysisResult records for download.

    CSV output is a flat ``Section,Item,Value`` table; JSON output is the
    record's persisted form.
    """

    def to_json(self, result: AnalysisResult) -> str:
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

    def to_csv(self, result: AnalysisResult) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["Section", "Item", "Value"])

        writer.writerow(["Overview", "Document Type", result.doc_type])
        if result.title:
            writer.writerow(["Overview", "Title", result.title])
        if result.issuer:
            writer.writerow(["Overview", "Issuer", result.issuer])
        if result.recipient:
            writer.writerow(["Overview", "Recipient", result.recipient])
        writer.writerow(["Overview", "Summary", result.summary])
        writer.writerow(["Overview", "Confidence", f"{result.confidence:.2f}"])
        writer.writerow(["Overview", "Data Quality", result.data_quality.value])
        writer.writerow(["Overview", "Processed Rows", result.processed_rows])
        if result.domain:
            writer.writerow(["Overview", "Domain", result.domain])

        for key, value in result.stats.to_dict().items():
            writer.writerow(["Statistics", key, value])
        for kind, values in result.entities.items():
            for value in values:
                writer.writerow(["Entities", kind.plural, value])
        for index, finding in enumerate(result.key_findings, 1):
            writer.writerow(["Key Findings", index, finding])
        for index, recommendation in enumerate(result.recommendations, 1):
            writer.writerow(["Recommendations", index, recommendation])
        for column in result.columns:
            writer.writerow(["Columns", column.key, column.column_type.value])

        return output.getvalue()

    def export(
        self,
        result: AnalysisResult,
        fmt: str,
        sink: IExportSink,
        base_name: str = "analysis",
    ) -> str:
        """
        Format a result and deliver it through a sink.

        Args:
            result: Analysis to export.
            fmt: ``"csv"`` or ``"json"``.
            sink: Destination for the artifact.
            base_name: File name without extension.

        Returns:
            The sink's locator for the artifact.

        Raises:
            ValueError: If the format is not supported.
        """
        fmt = (fmt or "").lower()
        if fmt == "json":
            content = self.to_json(result)
        elif fmt == "csv":
            content = self.to_csv(result)
        else:
            raise ValueError(f"Unsupported export format: {fmt}. Use 'json' or 'csv'.")

        return sink.deliver(content, MIME_TYPES[fmt], f"{base_name}.{fmt}")
