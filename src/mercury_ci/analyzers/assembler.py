"""Analysis assembly for uploaded files.

Combines the entity extractor, document classifier and CSV profiler into a
single ``AnalysisResult``. The sub-pipeline is chosen by file extension:

- ``csv``: CSV profiler path
- ``txt`` / ``md``: text statistics path
- ``pdf`` / ``doc`` / ``docx``: entity extraction + classification path

Content that carries an extraction error marker (or is empty) always falls
back to filename-only inference.
"""

import logging
from typing import Dict, List, Optional

from ..extractors.document_classifier import DEFAULT_DOCUMENT_TYPE, DocumentClassifier
from ..extractors.entity_patterns import EntityExtractor
from ..extractors.text_stats import compute_text_stats, top_topics
from ..models.analysis import AnalysisResult, CSVProfile, EntityMap, Visualisation
from ..models.enums import ColumnType, DataDomain, DataQuality, EntityKind, SourceType
from .csv_profiler import CSVProfiler, confidence_for_rows, data_quality_for_rows


logger = logging.getLogger(__name__)

CSV_EXTENSIONS = frozenset({"csv"})
TEXT_EXTENSIONS = frozenset({"txt", "md"})
DOCUMENT_EXTENSIONS = frozenset({"pdf", "doc", "docx"})
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS | TEXT_EXTENSIONS | DOCUMENT_EXTENSIONS

ERROR_MARKER_PREFIXES = ("[PDF file", "[DOC file", "[DOCX file", "[Binary file")
ERROR_MARKER_TEXT = "Error extracting content"

BINARY_CONFIDENCE = 0.3

ENTITY_LABELS: Dict[EntityKind, str] = {
    EntityKind.EMAIL: "email address(es)",
    EntityKind.PHONE: "phone number(s)",
    EntityKind.POSTCODE: "postcode(s)",
    EntityKind.CURRENCY: "monetary amount(s)",
    EntityKind.NI_NUMBER: "National Insurance number(s)",
    EntityKind.DATE: "date(s)",
    EntityKind.VAT_NUMBER: "VAT number(s)",
    EntityKind.COMPANY_NUMBER: "company number(s)",
    EntityKind.INVOICE_NUMBER: "invoice reference(s)",
    EntityKind.ACCOUNT_NUMBER: "account number(s)",
    EntityKind.PERSON: "named individual(s)",
    EntityKind.ORGANISATION: "organisation(s)",
    EntityKind.URL: "web link(s)",
}

DOC_TYPE_RECOMMENDATIONS: Dict[str, str] = {
    "Invoice": "Verify invoice amounts and schedule payment before the due date",
    "Receipt": "File the receipt against the relevant expense claim",
    "Statement": "Reconcile the statement against internal account records",
    "Contract": "Review key obligations and renewal dates with the legal team",
    "Report": "Circulate the key findings to the relevant stakeholders",
    "Letter": "Log the correspondence and assign an owner for any follow-up",
}

DOMAIN_RECOMMENDATIONS: Dict[str, str] = {
    DataDomain.FINANCIAL.value: "Reconcile the financial totals against the general ledger",
    DataDomain.SALES.value: "Segment sales performance by customer and product",
    DataDomain.MARKETING.value: "Compare campaign conversion rates across channels",
    DataDomain.HR.value: "Review headcount and salary distribution by department",
    DataDomain.OPERATIONS.value: "Monitor stock and delivery indicators for bottlenecks",
}


def get_extension(file_name: str) -> str:
    """Lower-case extension without the dot, or an empty string."""
    if not file_name or "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[1].lower()


def is_extraction_error(content: Optional[str]) -> bool:
    """Check whether content is an extraction error marker (or empty)."""
    if content is None or not content.strip():
        return True
    stripped = content.lstrip()
    return stripped.startswith(ERROR_MARKER_PREFIXES) or ERROR_MARKER_TEXT in content


def text_confidence(word_count: int) -> float:
    if word_count > 500:
        return 0.85
    if word_count > 100:
        return 0.75
    return 0.6


def text_data_quality(word_count: int) -> DataQuality:
    if word_count > 1000:
        return DataQuality.HIGH
    if word_count > 200:
        return DataQuality.MEDIUM
    return DataQuality.LOW


def document_confidence(kind_count: int) -> float:
    if kind_count >= 3:
        return 0.9
    if kind_count >= 1:
        return 0.8
    return 0.65


def document_data_quality(kind_count: int, word_count: int) -> DataQuality:
    if kind_count >= 3 and word_count > 300:
        return DataQuality.HIGH
    if kind_count >= 1 or word_count > 300:
        return DataQuality.MEDIUM
    return DataQuality.LOW


class AnalysisAssembler:
    """
    Builds AnalysisResult records for uploaded content.

    The assembler's only error handling is the extraction-marker fallback;
    unexpected exceptions from a sub-pipeline propagate to the caller.
    """

    def __init__(
        self,
        entity_extractor: Optional[EntityExtractor] = None,
        classifier: Optional[DocumentClassifier] = None,
        profiler: Optional[CSVProfiler] = None,
    ):
        self._extractor = entity_extractor or EntityExtractor()
        self._classifier = classifier or DocumentClassifier()
        self._profiler = profiler or CSVProfiler()

    def assemble(self, file_name: str, content: Optional[str]) -> AnalysisResult:
        """
        Analyse a file's extracted content.

        Args:
            file_name: Original file name; its extension selects the path.
            content: Extracted text or an error-marker string.

        Returns:
            A fully populated AnalysisResult.
        """
        extension = get_extension(file_name)

        if is_extraction_error(content):
            logger.warning(f"No usable content for {file_name}; falling back to filename inference")
            return self.analyze_binary_file_from_filename(file_name)

        if extension in CSV_EXTENSIONS:
            logger.info(f"Analysing {file_name} as CSV")
            return self._analyse_csv(file_name, content)
        if extension in TEXT_EXTENSIONS:
            logger.info(f"Analysing {file_name} as text")
            return self._analyse_text(file_name, content)
        if extension in DOCUMENT_EXTENSIONS:
            logger.info(f"Analysing {file_name} as document")
            return self._analyse_document(file_name, content)

        logger.warning(f"Unrecognised extension '{extension}' for {file_name}")
        return self.analyze_binary_file_from_filename(file_name)

    def analyze_binary_file_from_filename(self, file_name: str) -> AnalysisResult:
        """
        Infer what little we can about a file from its name alone.

        Used when content extraction failed. Confidence is fixed at 0.3
        and data quality at Low.
        """
        extension = get_extension(file_name) or "unknown"
        doc_type = self._classifier.detect_type(file_name, "")

        key_findings = [
            f"File type: {extension.upper()}",
            f"Inferred document type from file name: {doc_type}",
            "Content could not be extracted for detailed analysis",
        ]
        recommendations = [
            "Upload a text-based version of the file (TXT or CSV) for full analysis",
            "Check whether the file is scanned, encrypted or password-protected",
        ]
        if doc_type in DOC_TYPE_RECOMMENDATIONS:
            recommendations.append(DOC_TYPE_RECOMMENDATIONS[doc_type])

        return AnalysisResult(
            doc_type=doc_type,
            title=file_name,
            summary=(
                f"{file_name} appears to be a {doc_type.lower()} ({extension.upper()} file). "
                "Its content could not be read, so this analysis is based on the file name only."
            ),
            key_findings=key_findings,
            recommendations=recommendations,
            confidence=BINARY_CONFIDENCE,
            data_quality=DataQuality.LOW,
            processed_rows=0,
            source_type=SourceType.BINARY,
        )

    # ------------------------------------------------------------------
    # CSV path
    # ------------------------------------------------------------------

    def _analyse_csv(self, file_name: str, content: str) -> AnalysisResult:
        profile = self._profiler.profile(content)
        completeness = self._completeness(profile)

        numeric = profile.numeric_columns
        dates = profile.date_columns
        text_count = len(profile.headers) - len(numeric) - len(dates)

        summary = (
            f"Analysed {profile.row_count} records across {len(profile.headers)} columns "
            f"in {file_name}. The dataset looks like {profile.domain} data with "
            f"{len(numeric)} numeric, {len(dates)} date and {text_count} text column(s)."
        )

        key_findings: List[str] = []
        for name in numeric[:3]:
            stats = profile.numeric_stats.get(name)
            if stats:
                key_findings.append(
                    f"{name} ranges from {stats.min:,.2f} to {stats.max:,.2f} "
                    f"(mean {stats.mean:,.2f} over {stats.count} values)"
                )
        if dates:
            key_findings.append(
                f"Date column(s) detected: {', '.join(dates)}, suitable for time-series analysis"
            )
        if profile.domain != DataDomain.GENERAL.value:
            key_findings.append(f"Column names indicate a {profile.domain} dataset")
        key_findings.append(f"Data completeness: {completeness:.0f}% of cells populated")

        recommendations: List[str] = []
        if numeric and dates:
            recommendations.append(f"Chart {numeric[0]} over {dates[0]} to track trends")
        if numeric:
            recommendations.append(f"Investigate outliers in {numeric[0]} before reporting")
        if profile.domain in DOMAIN_RECOMMENDATIONS:
            recommendations.append(DOMAIN_RECOMMENDATIONS[profile.domain])
        if completeness < 90:
            recommendations.append("Fill or remove incomplete records before modelling")
        if profile.row_count <= 10:
            recommendations.append("Collect more records to improve the reliability of the analysis")
        if not recommendations:
            recommendations.append("Schedule a regular refresh of this dataset to monitor changes")

        return AnalysisResult(
            doc_type=self._classifier.detect_type(file_name, ""),
            title=file_name,
            stats=compute_text_stats(content),
            entities=self._extractor.extract(content),
            summary=summary,
            key_findings=key_findings,
            recommendations=recommendations,
            visualisations=self._csv_visualisations(profile),
            confidence=confidence_for_rows(profile.row_count),
            data_quality=data_quality_for_rows(profile.row_count),
            processed_rows=profile.row_count,
            source_type=SourceType.CSV,
            domain=profile.domain,
            columns=profile.columns,
        )

    def _completeness(self, profile: CSVProfile) -> float:
        total = profile.row_count * len(profile.headers)
        if total == 0:
            return 0.0
        filled = sum(column.non_empty_count for column in profile.columns)
        return 100.0 * filled / total

    def _csv_visualisations(self, profile: CSVProfile) -> List[Visualisation]:
        visualisations: List[Visualisation] = []
        numeric = profile.numeric_columns
        dates = profile.date_columns

        if numeric and dates:
            visualisations.append(Visualisation(
                type="line",
                title=f"{numeric[0]} over time",
                description=f"Trend of {numeric[0]} by {dates[0]}",
                icon="📈",
                data={"x": dates[0], "y": numeric[0]},
            ))
        for name in numeric[:3]:
            stats = profile.numeric_stats.get(name)
            visualisations.append(Visualisation(
                type="bar",
                title=f"{name} summary",
                description=f"Minimum, mean and maximum of {name}",
                icon="📊",
                data=stats.to_dict() if stats else None,
            ))

        mix = {column_type.value: 0 for column_type in ColumnType}
        for column_type in profile.column_types:
            mix[column_type.value] += 1
        visualisations.append(Visualisation(
            type="pie",
            title="Column types",
            description="Share of numeric, date and text columns",
            icon="🥧",
            data=mix,
        ))
        return visualisations

    # ------------------------------------------------------------------
    # Text path
    # ------------------------------------------------------------------

    def _analyse_text(self, file_name: str, content: str) -> AnalysisResult:
        stats = compute_text_stats(content)
        entities = self._extractor.extract(content)
        classification = self._classifier.classify(file_name, content)
        topics = top_topics(content)

        topic_text = ", ".join(topics[:3]) if topics else "no dominant topics"
        summary = (
            f"{file_name} contains {stats.word_count} words across "
            f"{stats.paragraph_count} paragraph(s) (about {stats.pages_hint} page(s)). "
            f"Main topics: {topic_text}."
        )

        key_findings = [f"Document length: {stats.word_count} words over {stats.line_count} lines"]
        if topics:
            key_findings.append(f"Most frequent topics: {', '.join(topics)}")
        if classification.doc_type != DEFAULT_DOCUMENT_TYPE:
            key_findings.append(f"Content reads like a {classification.doc_type.lower()}")
        key_findings.extend(self._entity_findings(entities))

        recommendations = self._entity_recommendations(entities)
        if stats.word_count > 1000:
            recommendations.append("Prepare an executive summary for quicker review")
        if not recommendations:
            recommendations.append("Archive this document with descriptive tags for future search")

        return AnalysisResult(
            doc_type=classification.doc_type,
            issuer=classification.issuer,
            recipient=classification.recipient,
            title=self._classifier.extract_title(content),
            stats=stats,
            entities=entities,
            summary=summary,
            key_findings=key_findings,
            recommendations=recommendations,
            visualisations=[Visualisation(
                type="bar",
                title="Document structure",
                description="Words, lines and paragraphs in the document",
                icon="📝",
                data={
                    "words": stats.word_count,
                    "lines": stats.line_count,
                    "paragraphs": stats.paragraph_count,
                },
            )],
            confidence=text_confidence(stats.word_count),
            data_quality=text_data_quality(stats.word_count),
            processed_rows=stats.word_count,
            source_type=SourceType.TEXT,
        )

    # ------------------------------------------------------------------
    # Document path
    # ------------------------------------------------------------------

    def _analyse_document(self, file_name: str, content: str) -> AnalysisResult:
        stats = compute_text_stats(content)
        entities = self._extractor.extract(content)
        classification = self._classifier.classify(file_name, content)
        kind_count = EntityExtractor.count_kinds(entities)
        total = EntityExtractor.total_entities(entities)

        parties = []
        if classification.issuer:
            parties.append(f"from {classification.issuer}")
        if classification.recipient:
            parties.append(f"to {classification.recipient}")
        party_text = f" {' '.join(parties)}" if parties else ""

        summary = (
            f"{file_name} was identified as a {classification.doc_type.lower()}{party_text}. "
            f"It contains {stats.word_count} words and {total} extracted "
            f"entit{'y' if total == 1 else 'ies'} across {kind_count} categor"
            f"{'y' if kind_count == 1 else 'ies'}."
        )

        key_findings = [f"Document type: {classification.doc_type}"]
        if classification.issuer:
            key_findings.append(f"Issued by: {classification.issuer}")
        if classification.recipient:
            key_findings.append(f"Addressed to: {classification.recipient}")
        key_findings.extend(self._entity_findings(entities))
        if len(key_findings) == 1:
            key_findings.append(f"Document length: {stats.word_count} words")

        recommendations: List[str] = []
        if classification.doc_type in DOC_TYPE_RECOMMENDATIONS:
            recommendations.append(DOC_TYPE_RECOMMENDATIONS[classification.doc_type])
        recommendations.extend(self._entity_recommendations(entities))
        if not recommendations:
            recommendations.append("Tag and file the document so it can be found later")

        counts = {
            kind.plural: len(values) for kind, values in entities.items() if values
        }
        return AnalysisResult(
            doc_type=classification.doc_type,
            issuer=classification.issuer,
            recipient=classification.recipient,
            title=self._classifier.extract_title(content),
            stats=stats,
            entities=entities,
            summary=summary,
            key_findings=key_findings,
            recommendations=recommendations,
            visualisations=[Visualisation(
                type="bar",
                title="Extracted entities",
                description="Number of values found per entity category",
                icon="🔎",
                data=counts,
            )],
            confidence=document_confidence(kind_count),
            data_quality=document_data_quality(kind_count, stats.word_count),
            processed_rows=stats.word_count,
            source_type=SourceType.DOCUMENT,
        )

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _entity_findings(self, entities: EntityMap) -> List[str]:
        findings = []
        for kind, values in entities.items():
            if values:
                sample = ", ".join(values[:3])
                findings.append(f"Found {len(values)} {ENTITY_LABELS[kind]}: {sample}")
        return findings

    def _entity_recommendations(self, entities: EntityMap) -> List[str]:
        recommendations = []
        if entities[EntityKind.CURRENCY]:
            recommendations.append("Review the monetary amounts as part of a financial check")
        if entities[EntityKind.NI_NUMBER]:
            recommendations.append(
                "Restrict access to this file: it holds National Insurance numbers"
            )
        if entities[EntityKind.EMAIL] or entities[EntityKind.PHONE]:
            recommendations.append("Add the contact details found to your CRM")
        if entities[EntityKind.DATE]:
            recommendations.append("Add the dates mentioned to the team calendar")
        if entities[EntityKind.VAT_NUMBER] or entities[EntityKind.COMPANY_NUMBER]:
            recommendations.append("Verify the company and VAT registrations against public records")
        return recommendations
