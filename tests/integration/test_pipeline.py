"""Integration tests for the Mercury pipeline."""

import asyncio
from unittest.mock import Mock

import pytest

from mercury_ci.analyzers.assembler import AnalysisAssembler
from mercury_ci.config import AppConfig, StorageBackend
from mercury_ci.exceptions import (
    AnalysisUnavailableError,
    InvalidTransitionError,
    NotFoundError,
    UnsupportedFileTypeError,
)
from mercury_ci.generators import MemoryExportSink
from mercury_ci.models.enums import FileStatus, SourceType
from mercury_ci.pipeline import MercuryPipeline, format_file_size
from mercury_ci.storage import InMemoryKeyValueStore


NOTES = (
    b"Quarterly review\n\nFrom: Acme Widgets Ltd\nTo: Finance Team\n"
    b"Revenue reached \xc2\xa31,250,000 and invoices were sent to jane@example.com."
)


@pytest.fixture
def sink():
    return MemoryExportSink()


@pytest.fixture
def pipeline(sink):
    """Create a pipeline over an in-memory store."""
    pipeline = MercuryPipeline(
        AppConfig(random_seed=1),
        store=InMemoryKeyValueStore(),
        export_sink=sink,
    )
    yield pipeline
    pipeline.close()


@pytest.fixture
def processed_file(pipeline):
    uploaded = pipeline.upload_file("notes.txt", NOTES)
    return asyncio.run(pipeline.analyse_file(uploaded.id))


class TestFileSize:
    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0 Bytes"),
            (1023, "1023 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (1024 ** 2, "1 MB"),
            (5 * 1024 ** 3, "5 GB"),
        ],
    )
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected


class TestFileLifecycle:
    """Tests for upload, analysis and status transitions."""

    def test_upload_stores_extracted_text(self, pipeline):
        uploaded = pipeline.upload_file("notes.txt", NOTES)

        assert uploaded.status == FileStatus.UPLOADED
        assert uploaded.data.startswith("Quarterly review")
        assert uploaded.size == format_file_size(len(NOTES))
        assert [f.id for f in pipeline.list_files()] == [uploaded.id]

    def test_analysis_completes(self, pipeline, processed_file):
        stored = pipeline.get_file(processed_file.id)

        assert stored.status == FileStatus.PROCESSED
        assert stored.analysis_result.source_type == SourceType.TEXT
        assert stored.analysis_result.issuer == "Acme Widgets Ltd"
        assert stored.insights == len(stored.analysis_result.key_findings)
        assert pipeline.get_stats().analyses_completed == 1

    def test_analysing_status_is_persisted_first(self, pipeline):
        uploaded = pipeline.upload_file("notes.txt", NOTES)

        pending = pipeline.start_analysis(uploaded.id)
        assert pipeline.get_file(uploaded.id).status == FileStatus.ANALYSING

        result = asyncio.run(pending)
        assert result.status == FileStatus.PROCESSED

    def test_processed_file_cannot_be_reanalysed(self, pipeline, processed_file):
        with pytest.raises(InvalidTransitionError):
            asyncio.run(pipeline.analyse_file(processed_file.id))

    def test_assembler_failure_sets_error(self, sink):
        assembler = Mock(spec=AnalysisAssembler)
        assembler.assemble.side_effect = RuntimeError("profiler crashed")
        pipeline = MercuryPipeline(
            store=InMemoryKeyValueStore(), assembler=assembler, export_sink=sink
        )
        uploaded = pipeline.upload_file("data.csv", b"a,b\n1,2\n")

        result = asyncio.run(pipeline.analyse_file(uploaded.id))

        assert result.status == FileStatus.ERROR
        assert pipeline.get_file(uploaded.id).analysis_result is None
        assert pipeline.get_stats().analyses_failed == 1
        with pytest.raises(InvalidTransitionError):
            pipeline.start_analysis(uploaded.id)

    def test_corrupt_pdf_uses_filename_inference(self, pipeline):
        uploaded = pipeline.upload_file("invoice_april.pdf", b"not a pdf")
        result = asyncio.run(pipeline.analyse_file(uploaded.id))

        assert result.status == FileStatus.PROCESSED
        assert result.analysis_result.source_type == SourceType.BINARY
        assert result.analysis_result.doc_type == "Invoice"
        assert result.analysis_result.confidence == 0.3

    def test_unsupported_type_rejected(self, pipeline):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            pipeline.upload_file("budget.xlsx", b"PK")

        assert "csv" in exc_info.value.get_supported_extensions()
        assert pipeline.list_files() == []

    def test_batch_upload(self, pipeline):
        outcome = asyncio.run(pipeline.upload_files(
            [
                ("notes.txt", NOTES),
                ("budget.xlsx", b"PK"),
                ("sales.csv", b"date,revenue\n2024-01-01,10\n2024-02-01,20\n"),
            ],
            analyse=True,
        ))

        assert sorted(f.name for f in outcome.accepted) == ["notes.txt", "sales.csv"]
        assert all(f.status == FileStatus.PROCESSED for f in outcome.accepted)
        assert [r.name for r in outcome.rejected] == ["budget.xlsx"]
        assert len(pipeline.list_files()) == 2
        assert pipeline.get_stats().files_rejected == 1

    def test_delete_file(self, pipeline):
        uploaded = pipeline.upload_file("notes.md", b"# Notes")
        pipeline.delete_file(uploaded.id)

        with pytest.raises(NotFoundError):
            pipeline.get_file(uploaded.id)
        with pytest.raises(NotFoundError):
            pipeline.delete_file(uploaded.id)


class TestExports:
    """Tests for analysis and report exports."""

    def test_export_analysis_csv(self, pipeline, sink, processed_file):
        locator = pipeline.export_analysis(processed_file.id, "csv")

        assert locator == "memory://notes_analysis.csv"
        assert sink.last.mime_type == "text/csv"
        assert sink.last.content.startswith("Section,Item,Value")

    def test_export_requires_analysis(self, pipeline):
        uploaded = pipeline.upload_file("notes.txt", NOTES)
        with pytest.raises(AnalysisUnavailableError):
            pipeline.export_analysis(uploaded.id, "json")

    def test_export_bad_format(self, pipeline, processed_file):
        with pytest.raises(ValueError):
            pipeline.export_analysis(processed_file.id, "pdf")

    def test_report_with_file_analysis(self, pipeline, sink, processed_file):
        report = pipeline.generate_report("market", file_id=processed_file.id)

        assert report.sections[-1].title == "Data Analysis"
        assert pipeline.get_report(report.id).title == "Market Intelligence Report"

        pipeline.export_report(report.id)
        assert sink.last.filename == "Market_Intelligence_Report.md"
        assert sink.last.content.startswith("# Market Intelligence Report")

    def test_report_requires_processed_file(self, pipeline):
        uploaded = pipeline.upload_file("notes.txt", NOTES)
        with pytest.raises(AnalysisUnavailableError):
            pipeline.generate_report("market", file_id=uploaded.id)
        with pytest.raises(NotFoundError):
            pipeline.generate_report("market", file_id="missing")
        assert pipeline.list_reports() == []

    def test_delete_report(self, pipeline):
        report = pipeline.generate_report("competitive")
        pipeline.delete_report(report.id)
        with pytest.raises(NotFoundError):
            pipeline.get_report(report.id)


class TestBriefings:
    """Tests for briefing storage through the pipeline."""

    def test_archive_lookup(self, pipeline):
        first = pipeline.generate_briefing("2024-03-01", company="Acme Ltd")
        for day in range(2, 22):
            pipeline.generate_briefing(f"2024-03-{day:02d}")

        assert len(pipeline.list_briefings()) == 20
        assert [b.id for b in pipeline.list_archived_briefings()] == [first.id]
        assert pipeline.get_briefing(first.id).company == "Acme Ltd"

        pipeline.delete_briefing(first.id)
        assert pipeline.list_archived_briefings() == []
        with pytest.raises(NotFoundError):
            pipeline.get_briefing(first.id)

    def test_seeded_briefings_match(self):
        first = MercuryPipeline(AppConfig(random_seed=5), store=InMemoryKeyValueStore())
        second = MercuryPipeline(AppConfig(random_seed=5), store=InMemoryKeyValueStore())

        assert (
            first.generate_briefing("2024-03-05").briefing
            == second.generate_briefing("2024-03-05").briefing
        )

    def test_configured_default_sources(self):
        pipeline = MercuryPipeline(
            AppConfig(default_sources=["economic"]), store=InMemoryKeyValueStore()
        )
        assert pipeline.generate_briefing("2024-03-05").sources == ["economic"]


class TestSQLBackend:
    def test_collections_survive_restart(self, tmp_path, sink):
        config = AppConfig(
            storage_backend=StorageBackend.SQL,
            database_url=f"sqlite:///{tmp_path / 'mercury.db'}",
        )
        pipeline = MercuryPipeline(config, export_sink=sink)
        briefing = pipeline.generate_briefing("2024-03-05")
        uploaded = pipeline.upload_file("sales.csv", b"units,price\n1,2\n3,4\n")
        asyncio.run(pipeline.analyse_file(uploaded.id))
        pipeline.close()

        restarted = MercuryPipeline(config, export_sink=sink)
        try:
            assert [b.id for b in restarted.list_briefings()] == [briefing.id]
            assert restarted.get_file(uploaded.id).status == FileStatus.PROCESSED
        finally:
            restarted.close()


def test_analyse_data_tool(pipeline):
    result = pipeline.analyse_data("x,y\n1,2\n2,4\n3,6\n")
    assert result.metrics["Total Records"] == 3


def test_from_environment_exports_to_disk(monkeypatch, tmp_path):
    monkeypatch.setenv("MERCURY_STORAGE_BACKEND", "memory")
    monkeypatch.setenv("MERCURY_RANDOM_SEED", "4")
    monkeypatch.setenv("MERCURY_EXPORT_DIR", str(tmp_path / "exports"))

    pipeline = MercuryPipeline.from_environment()
    report = pipeline.generate_report("market")
    path = pipeline.export_report(report.id)

    assert pipeline.config.random_seed == 4
    assert path == str(tmp_path / "exports" / "Market_Intelligence_Report.md")
    assert (tmp_path / "exports" / "Market_Intelligence_Report.md").exists()
