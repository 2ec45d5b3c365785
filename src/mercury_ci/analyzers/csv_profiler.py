"""CSV profiling: column type inference, numeric statistics and domain detection."""

import csv
import io
import math
import re
from datetime import datetime
from typing import List, Optional, Tuple

from ..models.analysis import ColumnProfile, CSVProfile, NumericStats
from ..models.enums import ColumnType, DataDomain, DataQuality

# Share of non-empty values that must parse for a column to take a type
TYPE_THRESHOLD = 0.8

DOMAIN_KEYWORDS: List[Tuple[DataDomain, Tuple[str, ...]]] = [
    (DataDomain.FINANCIAL, (
        "revenue", "price", "cost", "profit", "income", "expense", "budget",
        "amount", "balance", "margin", "tax", "invoice", "payment",
    )),
    (DataDomain.SALES, (
        "sales", "sold", "order", "customer", "quantity", "units", "deal", "product",
    )),
    (DataDomain.MARKETING, (
        "campaign", "click", "impression", "conversion", "ctr", "lead",
        "channel", "engagement", "audience",
    )),
    (DataDomain.HR, (
        "employee", "salary", "department", "hire", "staff", "headcount",
        "tenure", "attrition",
    )),
    (DataDomain.OPERATIONS, (
        "inventory", "supplier", "shipment", "delivery", "warehouse", "stock",
        "logistics", "production",
    )),
]

DATE_FORMATS = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%d/%m/%y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m",
)

_NUMBER_NOISE = re.compile(r"[£$€,%\s]")


def parse_number(value: str) -> Optional[float]:
    """
    Parse a cell as a number.

    Currency symbols, percent signs, thousands separators and spaces are
    ignored. Returns None when the value is not a finite number.
    """
    if value is None:
        return None
    cleaned = _NUMBER_NOISE.sub("", str(value))
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_date(value: str) -> Optional[datetime]:
    """Parse a cell as a date using the known formats."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def data_quality_for_rows(row_count: int) -> DataQuality:
    """High above 1000 rows, Medium above 100, otherwise Low."""
    if row_count > 1000:
        return DataQuality.HIGH
    if row_count > 100:
        return DataQuality.MEDIUM
    return DataQuality.LOW


def column_keys(headers: List[str]) -> List[str]:
    """Unique per-column keys; a repeated header gets its occurrence number, e.g. ``x (2)``."""
    keys: List[str] = []
    taken = set()
    for header in headers:
        key, occurrence = header, 1
        while key in taken:
            occurrence += 1
            key = f"{header} ({occurrence})"
        taken.add(key)
        keys.append(key)
    return keys


def confidence_for_rows(row_count: int) -> float:
    """0.9 above 50 rows, 0.8 above 10, otherwise 0.6."""
    if row_count > 50:
        return 0.9
    if row_count > 10:
        return 0.8
    return 0.6


class CSVProfiler:
    """
    Profiles raw CSV text.

    The first non-blank line is the header row; every following non-blank
    line is a data row.
    """

    def profile(self, csv_text: str) -> CSVProfile:
        """
        Profile CSV text.

        Args:
            csv_text: Raw CSV content.

        Returns:
            CSVProfile with headers, row count, per-column types, numeric
            statistics and detected domain.
        """
        rows = self.read_rows(csv_text)
        if not rows:
            return CSVProfile()

        headers = [h.strip() for h in rows[0]]
        data_rows = rows[1:]

        columns: List[ColumnProfile] = []
        for index, (header, key) in enumerate(zip(headers, column_keys(headers))):
            values = [
                row[index].strip() for row in data_rows
                if index < len(row) and row[index].strip()
            ]
            column = self._profile_column(header, values)
            column.index = index
            column.key = key
            columns.append(column)

        return CSVProfile(
            headers=headers,
            row_count=len(data_rows),
            column_types=[c.column_type for c in columns],
            numeric_stats={c.key: c.stats for c in columns if c.stats is not None},
            domain=self.detect_domain(headers).value,
            columns=columns,
        )

    def detect_domain(self, headers: List[str]) -> DataDomain:
        """Return the first domain whose keywords appear in any header."""
        lowered = [h.lower() for h in headers]
        for domain, keywords in DOMAIN_KEYWORDS:
            if any(keyword in header for header in lowered for keyword in keywords):
                return domain
        return DataDomain.GENERAL

    def infer_column_type(self, values: List[str]) -> ColumnType:
        """Classify a column from its non-empty values."""
        if not values:
            return ColumnType.TEXT

        numeric = sum(1 for v in values if parse_number(v) is not None)
        if numeric / len(values) >= TYPE_THRESHOLD:
            return ColumnType.NUMERIC

        dates = sum(1 for v in values if parse_date(v) is not None)
        if dates / len(values) >= TYPE_THRESHOLD:
            return ColumnType.DATE

        return ColumnType.TEXT

    def _profile_column(self, name: str, values: List[str]) -> ColumnProfile:
        column_type = self.infer_column_type(values)
        stats = None
        if column_type == ColumnType.NUMERIC:
            stats = self._numeric_stats(values)
        return ColumnProfile(
            name=name,
            column_type=column_type,
            non_empty_count=len(values),
            stats=stats,
        )

    def _numeric_stats(self, values: List[str]) -> Optional[NumericStats]:
        """Statistics over parseable values only; others are skipped."""
        numbers = [n for n in (parse_number(v) for v in values) if n is not None]
        if not numbers:
            return None
        return NumericStats(
            min=min(numbers),
            max=max(numbers),
            mean=sum(numbers) / len(numbers),
            count=len(numbers),
        )

    def read_rows(self, csv_text: str) -> List[List[str]]:
        """Split into non-blank lines and parse them as CSV records."""
        if not csv_text:
            return []
        lines = [line for line in csv_text.splitlines() if line.strip()]
        if not lines:
            return []
        return list(csv.reader(io.StringIO("\n".join(lines))))
