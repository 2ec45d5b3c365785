"""Data-analysis tool: CSV insights, trends and metrics."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..models.analysis import CSVProfile, Visualisation
from .csv_profiler import CSVProfiler, parse_number


logger = logging.getLogger(__name__)

DEFAULT_ANALYSIS_TYPE = "comprehensive"
DEFAULT_FOCUS_AREAS = ["trends", "correlations", "outliers"]

# Values further than this many standard deviations from the mean are outliers
OUTLIER_THRESHOLD = 2.0
STRONG_CORRELATION = 0.7


@dataclass
class DataAnalysisToolResult:
    """Result of the data-analysis tool."""
    summary: str
    key_findings: List[str] = field(default_factory=list)
    trends: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)
    visualisations: List[Visualisation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "keyFindings": list(self.key_findings),
            "trends": list(self.trends),
            "recommendations": list(self.recommendations),
            "metrics": dict(self.metrics),
            "visualisations": [v.to_dict() for v in self.visualisations],
        }


def pearson(xs: List[float], ys: List[float]) -> Optional[float]:
    """Pearson correlation of paired samples, or None when undefined."""
    n = len(xs)
    if n < 3 or n != len(ys):
        return None
    mean_x = sum(xs) / n
    mean_y = sum(ys) / n
    cov = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys))
    var_x = sum((x - mean_x) ** 2 for x in xs)
    var_y = sum((y - mean_y) ** 2 for y in ys)
    if var_x == 0 or var_y == 0:
        return None
    return cov / math.sqrt(var_x * var_y)


def count_outliers(values: List[float]) -> int:
    if len(values) < 3:
        return 0
    mean = sum(values) / len(values)
    std = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
    if std == 0:
        return 0
    return sum(1 for v in values if abs(v - mean) > OUTLIER_THRESHOLD * std)


def trend_direction(values: List[float]) -> str:
    """Compare the mean of the second half against the first half."""
    if len(values) < 2:
        return "Insufficient data"
    half = len(values) // 2
    first = sum(values[:half]) / half
    second = sum(values[half:]) / (len(values) - half)
    if second > first:
        return "Positive"
    if second < first:
        return "Negative"
    return "Flat"


class DataAnalyser:
    """
    Analyses CSV text for trends, correlations and outliers.

    Built on the CSV profiler so every figure comes from the data itself.
    """

    def __init__(self, profiler: Optional[CSVProfiler] = None):
        self._profiler = profiler or CSVProfiler()

    def analyse(
        self,
        csv_text: str,
        analysis_type: Optional[str] = None,
        focus_areas: Optional[List[str]] = None,
    ) -> DataAnalysisToolResult:
        """
        Analyse CSV data.

        Args:
            csv_text: Raw CSV content, header row first.
            analysis_type: Kind of analysis (``trend``, ``correlation``,
                ``summary``, ...). Defaults to ``comprehensive``.
            focus_areas: Areas to report on. Defaults to trends,
                correlations and outliers.

        Returns:
            DataAnalysisToolResult with findings, trends and metrics.
        """
        analysis = analysis_type or DEFAULT_ANALYSIS_TYPE
        areas = [a.lower() for a in (focus_areas or DEFAULT_FOCUS_AREAS)]

        profile = self._profiler.profile(csv_text)
        series = self._numeric_series(csv_text, profile)
        logger.info(
            f"Running {analysis} analysis over {profile.row_count} rows "
            f"and {len(profile.headers)} columns"
        )

        completeness = self._completeness(profile)
        correlation = self._primary_correlation(csv_text, profile)
        outliers = {name: count_outliers(values) for name, values in series.items()}
        outlier_total = sum(outliers.values())
        primary = profile.numeric_columns[0] if profile.numeric_columns else None
        direction = trend_direction(series[primary]) if primary else "Insufficient data"

        summary = (
            f"Analysed {profile.row_count} records across {len(profile.headers)} variables "
            f"as a {analysis} analysis of {profile.domain} data. "
            f"{len(profile.numeric_columns)} numeric and {len(profile.date_columns)} date "
            f"column(s) were identified."
        )

        key_findings: List[str] = []
        if "correlations" in areas and correlation is not None:
            (left, right), r = correlation
            strength = "Strong" if abs(r) >= STRONG_CORRELATION else "Weak"
            key_findings.append(f"{strength} correlation between {left} and {right} (r={r:.2f})")
        if "outliers" in areas:
            flagged = [f"{name} ({count})" for name, count in outliers.items() if count]
            if flagged:
                key_findings.append(f"Outliers detected in: {', '.join(flagged)}")
            else:
                key_findings.append("No outliers detected in the numeric columns")
        for name in profile.numeric_columns[:2]:
            stats = profile.numeric_stats.get(name)
            if stats:
                key_findings.append(
                    f"{name} averages {stats.mean:,.2f} (range {stats.min:,.2f} to {stats.max:,.2f})"
                )
        key_findings.append(f"Data quality: {completeness:.0f}% complete")

        trends: List[str] = []
        if "trends" in areas:
            for name, values in list(series.items())[:3]:
                trends.append(f"{name}: {trend_direction(values).lower()} trend across the dataset")
            if profile.date_columns:
                trends.append(
                    f"Time-based ordering available through {profile.date_columns[0]}"
                )
        if not trends:
            trends.append("No numeric series available for trend detection")

        recommendations: List[str] = []
        if outlier_total:
            recommendations.append("Investigate outlier data points for potential data quality issues")
        if correlation is not None and abs(correlation[1]) >= STRONG_CORRELATION:
            recommendations.append("Implement automated monitoring for the identified correlation")
        if profile.date_columns:
            recommendations.append("Consider seasonal adjustments for forecasting models")
        if completeness < 95:
            recommendations.append("Review data collection processes to reduce missing values")
        if not recommendations:
            recommendations.append("Review data collection processes to maintain quality standards")

        metrics: Dict[str, Any] = {
            "Total Records": profile.row_count,
            "Data Completeness": f"{completeness:.0f}%",
            "Primary Correlation": round(correlation[1], 2) if correlation else None,
            "Outlier Count": outlier_total,
            "Trend Direction": direction,
        }

        return DataAnalysisToolResult(
            summary=summary,
            key_findings=key_findings,
            trends=trends,
            recommendations=recommendations,
            metrics=metrics,
            visualisations=self._visualisations(profile, correlation),
        )

    def _numeric_series(self, csv_text: str, profile: CSVProfile) -> Dict[str, List[float]]:
        rows = self._profiler.read_rows(csv_text)[1:]
        series: Dict[str, List[float]] = {}
        for key in profile.numeric_columns:
            index = profile.column(key).index
            values = [parse_number(row[index]) for row in rows if index < len(row)]
            series[key] = [v for v in values if v is not None]
        return series

    def _primary_correlation(
        self, csv_text: str, profile: CSVProfile
    ) -> Optional[Tuple[Tuple[str, str], float]]:
        """Correlation of the first two numeric columns over rows where both parse."""
        numeric = profile.numeric_columns
        if len(numeric) < 2:
            return None
        left, right = numeric[0], numeric[1]
        li, ri = profile.column(left).index, profile.column(right).index

        xs, ys = [], []
        for row in self._profiler.read_rows(csv_text)[1:]:
            if max(li, ri) >= len(row):
                continue
            x, y = parse_number(row[li]), parse_number(row[ri])
            if x is not None and y is not None:
                xs.append(x)
                ys.append(y)
        r = pearson(xs, ys)
        return ((left, right), r) if r is not None else None

    def _completeness(self, profile: CSVProfile) -> float:
        total = profile.row_count * len(profile.headers)
        if total == 0:
            return 0.0
        return 100.0 * sum(c.non_empty_count for c in profile.columns) / total

    def _visualisations(self, profile, correlation) -> List[Visualisation]:
        visualisations = [Visualisation(
            type="line",
            title="Trend Analysis",
            description="Time series showing key metrics over time",
            icon="📈",
            data={"columns": profile.numeric_columns[:3]},
        )]
        if correlation is not None:
            (left, right), r = correlation
            visualisations.append(Visualisation(
                type="scatter",
                title="Correlation Analysis",
                description=f"Relationship between {left} and {right}",
                icon="🔗",
                data={"x": left, "y": right, "r": round(r, 2)},
            ))
        visualisations.append(Visualisation(
            type="histogram",
            title="Distribution Analysis",
            description="Frequency distribution of key metrics",
            icon="📊",
            data={name: stats.to_dict() for name, stats in profile.numeric_stats.items()},
        ))
        return visualisations


def analyse_data(
    csv_text: str,
    analysis_type: Optional[str] = None,
    focus_areas: Optional[List[str]] = None,
) -> DataAnalysisToolResult:
    """Analyse CSV text with a default analyser."""
    return DataAnalyser().analyse(csv_text, analysis_type, focus_areas)
