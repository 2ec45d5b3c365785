"""Unit tests for briefing, report and export generation."""

import csv
import io
import json
from datetime import date
from unittest.mock import Mock

import pytest

from mercury_ci.analyzers.data_analysis import DataAnalysisToolResult
from mercury_ci.generators import (
    AnalysisExporter,
    BriefingGenerator,
    FileExportSink,
    MemoryExportSink,
    RandomContentSource,
    ReportGenerator,
)
from mercury_ci.generators.briefing_generator import (
    BASE_INSIGHTS,
    GENERAL_DEVELOPMENTS,
    format_long_date,
    parse_briefing_date,
)
from mercury_ci.generators.exporter import safe_filename
from mercury_ci.generators.report_generator import DEFAULT_RECOMMENDATIONS, DEFAULT_SECTIONS
from mercury_ci.interfaces.generator import IContentSource
from mercury_ci.models.analysis import AnalysisResult
from mercury_ci.models.enums import DataQuality, EntityKind


@pytest.fixture
def first_choice_source():
    source = Mock(spec=IContentSource)
    source.choose.side_effect = lambda options: options[0]
    source.index.return_value = 0
    return source


@pytest.fixture
def analysis_result():
    result = AnalysisResult(
        doc_type="Invoice",
        title="March invoice",
        summary="An invoice from Acme Ltd.",
        key_findings=["Found 1 email address(es): jane@example.com"],
        recommendations=["Add the contact details found to your CRM"],
        confidence=0.8,
        data_quality=DataQuality.MEDIUM,
        processed_rows=42,
    )
    result.entities[EntityKind.EMAIL] = ["jane@example.com"]
    return result


class TestBriefingDates:
    @pytest.mark.parametrize(
        "value", ["2024-03-05", "05/03/2024", date(2024, 3, 5)]
    )
    def test_parse(self, value):
        assert parse_briefing_date(value) == date(2024, 3, 5)

    @pytest.mark.parametrize("value", ["2024-13-01", "March 5th", ""])
    def test_parse_rejects(self, value):
        with pytest.raises(ValueError):
            parse_briefing_date(value)

    def test_format_long_date(self):
        assert format_long_date(date(2024, 3, 5)) == "5 March 2024"


class TestBriefingGenerator:
    def test_generate(self, first_choice_source):
        generator = BriefingGenerator(content_source=first_choice_source)
        briefing = generator.generate("2024-03-05", company="Acme Ltd", sources=["market"])

        assert briefing.title == "Daily Intelligence Briefing - 5 March 2024"
        assert briefing.date == "2024-03-05"
        assert briefing.company == "Acme Ltd"
        assert briefing.sources == ["market"]
        assert "Good Tuesday!" in briefing.briefing
        assert "intelligence briefing for Acme Ltd" in briefing.briefing
        assert "mixed signals with technology stocks leading gains" in briefing.briefing
        assert "The focus areas include market performance." in briefing.briefing
        assert "**Market Performance**" in briefing.briefing
        assert "This briefing incorporates data from: market" in briefing.briefing

    def test_kpis_use_content_source(self, first_choice_source):
        briefing = BriefingGenerator(content_source=first_choice_source).generate("2024-03-05")

        assert [k.metric for k in briefing.kpis] == [
            "Market Sentiment", "Volatility Index", "Sector Performance", "Economic Confidence",
        ]
        assert briefing.kpis[0].value == "Positive"
        assert briefing.kpis[0].change == "+3%"
        assert first_choice_source.index.call_count == 4

    def test_default_company_and_sources(self, first_choice_source):
        briefing = BriefingGenerator(content_source=first_choice_source).generate("05/03/2024")

        assert briefing.company is None
        assert "for your organisation" in briefing.briefing
        assert briefing.sources == ["news", "market", "social", "economic"]
        assert briefing.insights == BASE_INSIGHTS

    def test_unknown_sources_fall_back(self):
        assert BriefingGenerator.focus_areas(["weather"]) == [
            "market performance", "economic indicators",
        ]
        assert BriefingGenerator.key_developments(["weather"]) == GENERAL_DEVELOPMENTS

    def test_insights_capped(self):
        assert len(BriefingGenerator.generate_insights(["news", "social", "economic"])) == 4

    def test_seed_is_reproducible(self):
        first = BriefingGenerator(content_source=RandomContentSource(seed=7)).generate("2024-03-05")
        second = BriefingGenerator(content_source=RandomContentSource(seed=7)).generate("2024-03-05")

        assert first.briefing == second.briefing
        assert first.kpis == second.kpis
        assert first.id != second.id

    def test_invalid_date(self, first_choice_source):
        with pytest.raises(ValueError):
            BriefingGenerator(content_source=first_choice_source).generate("yesterday")


class TestRandomContentSource:
    def test_empty_options(self):
        with pytest.raises(ValueError):
            RandomContentSource(seed=1).choose([])

    def test_index_in_range(self):
        source = RandomContentSource(seed=1)
        assert all(0 <= source.index(3) < 3 for _ in range(50))


class TestReportGenerator:
    def test_generate_defaults(self):
        report = ReportGenerator().generate("market")

        assert report.title == "Market Intelligence Report"
        assert [s.title for s in report.sections] == DEFAULT_SECTIONS
        assert report.recommendations == DEFAULT_RECOMMENDATIONS
        assert report.metadata.confidence == 0.87
        assert report.metadata.report_type == "market"

    def test_custom_sections(self):
        report = ReportGenerator().generate("competitive", sections=["Pricing"])
        assert [s.title for s in report.sections] == ["Pricing"]
        assert "pricing" in report.sections[0].content

    def test_empty_type_rejected(self):
        with pytest.raises(ValueError):
            ReportGenerator().generate("  ")

    def test_analysis_data_adds_section(self, analysis_result):
        report = ReportGenerator().generate("market", data=analysis_result)

        assert report.sections[-1].title == "Data Analysis"
        assert "Confidence: 80% | Data quality: Medium" in report.sections[-1].content
        assert report.recommendations[-1] == "Add the contact details found to your CRM"

    def test_tool_result_data(self):
        data = DataAnalysisToolResult(
            summary="Analysed 4 records",
            trends=["x: positive trend across the dataset"],
            recommendations=[DEFAULT_RECOMMENDATIONS[0]],
        )
        report = ReportGenerator().generate("trend", data=data)

        assert "- x: positive trend across the dataset" in report.sections[-1].content
        assert report.recommendations == DEFAULT_RECOMMENDATIONS

    def test_render_markdown(self, analysis_result):
        generator = ReportGenerator()
        markdown = generator.render_markdown(generator.generate("market", data=analysis_result))

        assert markdown.startswith("# Market Intelligence Report")
        assert "Confidence 87%" in markdown
        assert "## Data Analysis" in markdown
        assert "1. Implement data-driven decision making" in markdown


class TestAnalysisExporter:
    def test_csv(self, analysis_result):
        rows = list(csv.reader(io.StringIO(AnalysisExporter().to_csv(analysis_result))))

        assert rows[0] == ["Section", "Item", "Value"]
        assert ["Overview", "Document Type", "Invoice"] in rows
        assert ["Overview", "Confidence", "0.80"] in rows
        assert ["Entities", "emails", "jane@example.com"] in rows
        assert ["Recommendations", "1", "Add the contact details found to your CRM"] in rows

    def test_json(self, analysis_result):
        data = json.loads(AnalysisExporter().to_json(analysis_result))
        assert data["docType"] == "Invoice"
        assert data["entities"]["emails"] == ["jane@example.com"]

    def test_memory_sink(self, analysis_result):
        sink = MemoryExportSink()
        locator = AnalysisExporter().export(analysis_result, "JSON", sink, base_name="march")

        assert locator == "memory://march.json"
        assert sink.last.mime_type == "application/json"

    def test_file_sink(self, analysis_result, tmp_path):
        sink = FileExportSink(str(tmp_path / "exports"))
        path = AnalysisExporter().export(analysis_result, "csv", sink)

        assert path.endswith("analysis.csv")
        assert (tmp_path / "exports" / "analysis.csv").read_text(encoding="utf-8").startswith(
            "Section,Item,Value"
        )

    def test_unsupported_format(self, analysis_result):
        with pytest.raises(ValueError, match="Unsupported export format"):
            AnalysisExporter().export(analysis_result, "xlsx", MemoryExportSink())

    def test_empty_memory_sink(self):
        with pytest.raises(LookupError):
            MemoryExportSink().last

    @pytest.mark.parametrize(
        "name, expected",
        [("my report/1.csv", "my_report_1.csv"), ("...", "export"), ("ok-name.json", "ok-name.json")],
    )
    def test_safe_filename(self, name, expected):
        assert safe_filename(name) == expected
