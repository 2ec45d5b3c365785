"""Unit tests for the CSV profiler."""

import pytest

from mercury_ci.analyzers.csv_profiler import (
    TYPE_THRESHOLD,
    CSVProfiler,
    column_keys,
    confidence_for_rows,
    data_quality_for_rows,
    parse_date,
    parse_number,
)
from mercury_ci.models.enums import ColumnType, DataDomain, DataQuality


def _price_date_name_csv(rows: int) -> str:
    lines = ["price,date,name"]
    for i in range(rows):
        lines.append(f"£{10 + i}.99,2024-01-{(i % 28) + 1:02d},Customer {i}")
    return "\n".join(lines)


@pytest.fixture
def profiler():
    return CSVProfiler()


class TestProfile:
    def test_price_date_name_dataset(self, profiler):
        profile = profiler.profile(_price_date_name_csv(150))

        assert profile.headers == ["price", "date", "name"]
        assert profile.row_count == 150
        assert profile.column_types == [ColumnType.NUMERIC, ColumnType.DATE, ColumnType.TEXT]
        assert profile.domain == DataDomain.FINANCIAL.value
        assert data_quality_for_rows(profile.row_count) == DataQuality.MEDIUM
        assert profile.numeric_columns == ["price"]
        assert profile.date_columns == ["date"]

    def test_numeric_stats(self, profiler):
        profile = profiler.profile("score\n10\n20\n30\n40\nn/a\n")
        stats = profile.numeric_stats["score"]

        assert profile.column_types == [ColumnType.NUMERIC]
        assert stats.min == 10
        assert stats.max == 40
        assert stats.mean == 25
        assert stats.count == 4

    def test_below_threshold_is_text(self, profiler):
        profile = profiler.profile("value\n1\n2\n3\nx\ny\n")
        assert TYPE_THRESHOLD == 0.8
        assert profile.column_types == [ColumnType.TEXT]
        assert "value" not in profile.numeric_stats

    def test_quoted_commas(self, profiler):
        profile = profiler.profile('name,amount\n"Smith, J","£1,200"\n')
        assert profile.row_count == 1
        assert profile.numeric_stats["amount"].max == 1200

    def test_blank_lines_and_crlf(self, profiler):
        profile = profiler.profile("a,b\r\n\r\n1,2\r\n   \r\n3,4\r\n")
        assert profile.row_count == 2

    def test_empty_column_is_text(self, profiler):
        profile = profiler.profile("a,b\n1,\n2,\n")
        assert profile.column_types == [ColumnType.NUMERIC, ColumnType.TEXT]
        assert profile.columns[1].non_empty_count == 0

    def test_header_only(self, profiler):
        profile = profiler.profile("a,b\n")
        assert profile.row_count == 0
        assert profile.column_types == [ColumnType.TEXT, ColumnType.TEXT]

    def test_empty_input(self, profiler):
        profile = profiler.profile("")
        assert profile.headers == []
        assert profile.row_count == 0

    def test_repeated_headers_keep_separate_stats(self, profiler):
        profile = profiler.profile("x,x,x\n1,alpha,10\n2,beta,30\n")

        assert profile.headers == ["x", "x", "x"]
        assert profile.column_types == [ColumnType.NUMERIC, ColumnType.TEXT, ColumnType.NUMERIC]
        assert profile.numeric_columns == ["x", "x (3)"]
        assert profile.numeric_stats["x"].max == 2
        assert profile.numeric_stats["x (3)"].max == 30
        assert [c.index for c in profile.columns] == [0, 1, 2]
        assert profile.column("x (3)").name == "x"

    def test_column_keys(self):
        assert column_keys(["a", "b"]) == ["a", "b"]
        assert column_keys(["a", "a", "a (2)"]) == ["a", "a (2)", "a (2) (2)"]

    @pytest.mark.parametrize(
        "headers, expected",
        [
            (["Revenue", "Region"], DataDomain.FINANCIAL),
            (["customer", "units"], DataDomain.SALES),
            (["campaign", "clicks"], DataDomain.MARKETING),
            (["employee", "department"], DataDomain.HR),
            (["warehouse", "stock"], DataDomain.OPERATIONS),
            (["foo", "bar"], DataDomain.GENERAL),
            (["sales", "profit"], DataDomain.FINANCIAL),
        ],
    )
    def test_domain_detection(self, profiler, headers, expected):
        assert profiler.detect_domain(headers) == expected


class TestThresholds:
    @pytest.mark.parametrize(
        "rows, expected",
        [(0, 0.6), (10, 0.6), (11, 0.8), (50, 0.8), (51, 0.9), (5000, 0.9)],
    )
    def test_confidence(self, rows, expected):
        assert confidence_for_rows(rows) == expected

    @pytest.mark.parametrize(
        "rows, expected",
        [
            (100, DataQuality.LOW),
            (101, DataQuality.MEDIUM),
            (1000, DataQuality.MEDIUM),
            (1001, DataQuality.HIGH),
        ],
    )
    def test_data_quality(self, rows, expected):
        assert data_quality_for_rows(rows) == expected


class TestParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [("1,234.5", 1234.5), ("£99", 99.0), ("12%", 12.0), ("(1,000)", -1000.0), (" 7 ", 7.0)],
    )
    def test_parse_number(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", "inf", "nan", None])
    def test_parse_number_rejects(self, value):
        assert parse_number(value) is None

    @pytest.mark.parametrize("value", ["2024-03-15", "15/03/2024", "15 March 2024", "Mar 15, 2024"])
    def test_parse_date(self, value):
        assert parse_date(value) is not None

    def test_parse_date_rejects_text(self):
        assert parse_date("hello") is None
