"""Intelligence report generation."""

import logging
import uuid
from typing import List, Optional, Sequence, Union

from ..analyzers.data_analysis import DataAnalysisToolResult
from ..models.analysis import AnalysisResult
from ..models.records import ReportMetadata, ReportSection, StoredReport
from ..models.timestamps import now_iso
from .templating import create_environment


logger = logging.getLogger(__name__)

REPORT_TEMPLATE = "report.md.j2"
REPORT_CONFIDENCE = 0.87
DATA_ANALYSIS_SECTION = "Data Analysis"

DEFAULT_SECTIONS = [
    "Executive Summary",
    "Market Analysis",
    "Competitive Landscape",
    "Strategic Recommendations",
    "Risk Assessment",
    "Implementation Roadmap",
]

DEFAULT_RECOMMENDATIONS = [
    "Implement data-driven decision making processes across all departments",
    "Invest in technology infrastructure to support advanced analytics",
    "Develop strategic partnerships to enhance market position",
    "Establish regular intelligence briefings for senior leadership",
    "Create automated reporting systems for continuous monitoring",
]

DATA_SOURCES = ["Market Data", "Internal Analytics", "Industry Reports", "Public Information"]

ReportData = Union[AnalysisResult, DataAnalysisToolResult]


class ReportGenerator:
    """Generates multi-section intelligence reports."""

    def __init__(self, template_dir: Optional[str] = None):
        self._env = create_environment(template_dir)

    def generate(
        self,
        report_type: str,
        data: Optional[ReportData] = None,
        sections: Optional[Sequence[str]] = None,
    ) -> StoredReport:
        """
        Generate a report.

        Args:
            report_type: Kind of report (``market``, ``competitive``, ...).
            data: Optional analysis to summarise in a "Data Analysis"
                section; its recommendations are merged into the report's.
            sections: Section titles. Defaults to the six standard sections.

        Returns:
            A new StoredReport (not yet persisted).

        Raises:
            ValueError: If report_type is empty.
        """
        report_type = (report_type or "").strip()
        if not report_type:
            raise ValueError("Report type must not be empty")

        generated_at = now_iso()
        report_sections = [
            ReportSection(title=title, content=self._section_content(title))
            for title in (sections or DEFAULT_SECTIONS)
        ]
        recommendations = list(DEFAULT_RECOMMENDATIONS)

        if data is not None:
            report_sections.append(self._data_section(data))
            for recommendation in data.recommendations:
                if recommendation not in recommendations:
                    recommendations.append(recommendation)

        logger.info(f"Generated {report_type} report with {len(report_sections)} sections")
        return StoredReport(
            id=uuid.uuid4().hex,
            report_type=report_type,
            title=f"{report_type[0].upper()}{report_type[1:]} Intelligence Report",
            executive_summary=(
                f"This comprehensive {report_type} intelligence report provides strategic "
                "insights and actionable recommendations based on current market conditions "
                "and data analysis. The report covers key market trends, competitive "
                "landscape, and strategic opportunities for business growth and optimisation."
            ),
            sections=report_sections,
            recommendations=recommendations,
            metadata=ReportMetadata(
                generated_at=generated_at,
                report_type=report_type,
                data_sources=list(DATA_SOURCES),
                confidence=REPORT_CONFIDENCE,
            ),
            generated_at=generated_at,
        )

    def render_markdown(self, report: StoredReport) -> str:
        """Render a report as a Markdown document."""
        return self._env.get_template(REPORT_TEMPLATE).render(report=report)

    def _section_content(self, title: str) -> str:
        return (
            f"This section provides detailed analysis of {title.lower()} including key "
            "findings, trends, and strategic implications for business decision-making."
        )

    def _data_section(self, data: ReportData) -> ReportSection:
        lines: List[str] = [data.summary]
        lines.extend(f"- {finding}" for finding in data.key_findings)
        if isinstance(data, AnalysisResult):
            lines.append(
                f"Confidence: {data.confidence:.0%} | Data quality: {data.data_quality.value}"
            )
        else:
            lines.extend(f"- {trend}" for trend in data.trends)
        return ReportSection(title=DATA_ANALYSIS_SECTION, content="\n".join(lines))
