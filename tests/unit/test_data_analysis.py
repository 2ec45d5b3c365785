"""Unit tests for the data-analysis tool."""

import pytest

from mercury_ci.analyzers.data_analysis import (
    DataAnalyser,
    analyse_data,
    count_outliers,
    pearson,
    trend_direction,
)


class TestStatistics:
    def test_pearson_perfect(self):
        assert pearson([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_pearson_undefined(self):
        assert pearson([1, 2], [1, 2]) is None
        assert pearson([1, 1, 1], [1, 2, 3]) is None

    def test_count_outliers(self):
        assert count_outliers([10.0] * 19 + [1000.0]) == 1
        assert count_outliers([5.0, 5.0, 5.0]) == 0

    @pytest.mark.parametrize(
        "values, expected",
        [
            ([1, 2, 3, 4], "Positive"),
            ([4, 3, 2, 1], "Negative"),
            ([2, 2, 2, 2], "Flat"),
            ([1], "Insufficient data"),
        ],
    )
    def test_trend_direction(self, values, expected):
        assert trend_direction(values) == expected


class TestDataAnalyser:
    def test_perfect_correlation(self):
        result = DataAnalyser().analyse("x,y\n1,2\n2,4\n3,6\n4,8\n")

        assert "Strong correlation between x and y (r=1.00)" in result.key_findings
        assert result.metrics["Primary Correlation"] == 1.0
        assert result.metrics["Trend Direction"] == "Positive"
        assert result.metrics["Total Records"] == 4
        assert result.metrics["Data Completeness"] == "100%"
        assert "Implement automated monitoring for the identified correlation" in (
            result.recommendations
        )
        assert [v.type for v in result.visualisations] == ["line", "scatter", "histogram"]

    def test_outlier_detection(self):
        rows = "\n".join(["10"] * 19 + ["1000"])
        result = DataAnalyser().analyse(f"value\n{rows}\n")

        assert result.metrics["Outlier Count"] == 1
        assert "Outliers detected in: value (1)" in result.key_findings
        assert result.metrics["Primary Correlation"] is None

    def test_empty_input(self):
        result = analyse_data("")

        assert result.metrics["Total Records"] == 0
        assert result.metrics["Data Completeness"] == "0%"
        assert result.metrics["Trend Direction"] == "Insufficient data"
        assert result.trends == ["No numeric series available for trend detection"]

    def test_focus_areas_limit_findings(self):
        result = DataAnalyser().analyse(
            "x,y\n1,2\n2,4\n3,6\n", analysis_type="trend", focus_areas=["Trends"]
        )

        assert not any("correlation" in f for f in result.key_findings)
        assert not any("outlier" in f.lower() for f in result.key_findings)
        assert result.trends[0] == "x: positive trend across the dataset"
        assert "as a trend analysis" in result.summary

    def test_to_dict_keys(self):
        data = analyse_data("a\n1\n2\n").to_dict()
        assert set(data) == {
            "summary", "keyFindings", "trends", "recommendations", "metrics", "visualisations",
        }

    def test_repeated_header_reads_its_own_column(self):
        result = DataAnalyser().analyse("x,x\na,1\nb,2\nc,3\nd,4\n")

        assert result.metrics["Trend Direction"] == "Positive"
        assert result.trends[0] == "x (2): positive trend across the dataset"
        assert any(f.startswith("x (2) averages 2.50") for f in result.key_findings)
        histogram = result.visualisations[-1]
        assert set(histogram.data) == {"x (2)"}

    def test_repeated_numeric_headers_correlate(self):
        result = DataAnalyser().analyse("v,v\n1,8\n2,6\n3,4\n4,2\n")

        assert "Strong correlation between v and v (2) (r=-1.00)" in result.key_findings
        assert set(result.visualisations[-1].data) == {"v", "v (2)"}
