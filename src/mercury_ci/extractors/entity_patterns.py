"""Entity pattern matching for uploaded text.

Each entity kind has its own pure extraction function so that its contract
can be verified on its own. ``EntityExtractor.extract`` runs all of them
independently and always returns a map containing every kind.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from ..models.analysis import EntityMap, empty_entity_map
from ..models.enums import EntityKind


@dataclass(frozen=True)
class EntityPattern:
    """Pattern definition for one entity kind."""
    kind: EntityKind
    patterns: tuple
    group: int = 0  # Capture group holding the value
    strip_chars: str = ""


_MONTHS = (
    r"(?:January|February|March|April|May|June|July|August|September|October|"
    r"November|December|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)"
)

EMAIL_PATTERN = EntityPattern(
    kind=EntityKind.EMAIL,
    patterns=(re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),),
)

# +44 or a leading 0, then at least ten digits, spaces or hyphens
PHONE_PATTERN = EntityPattern(
    kind=EntityKind.PHONE,
    patterns=(re.compile(r"(?<![\w+])(?:\+44[ ]?|0)\d[\d \-]{8,}\d"),),
)

DATE_PATTERN = EntityPattern(
    kind=EntityKind.DATE,
    patterns=(
        re.compile(r"\b\d{1,2}[/\-.]\d{1,2}[/\-.](?:\d{4}|\d{2})\b"),
        re.compile(rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s+{_MONTHS}\s+\d{{4}}\b", re.IGNORECASE),
    ),
)

CURRENCY_PATTERN = EntityPattern(
    kind=EntityKind.CURRENCY,
    patterns=(re.compile(r"(?:£|\$|\bUSD ?)\d+(?:,\d{3})*(?:\.\d+)?"),),
)

POSTCODE_PATTERN = EntityPattern(
    kind=EntityKind.POSTCODE,
    patterns=(re.compile(r"\b[A-Z]{1,2}\d[A-Z\d]? \d[A-Z]{2}\b"),),
)

NI_NUMBER_PATTERN = EntityPattern(
    kind=EntityKind.NI_NUMBER,
    patterns=(re.compile(r"\b[A-Z]{2}\d{6}[A-Z]\b"),),
)

VAT_NUMBER_PATTERN = EntityPattern(
    kind=EntityKind.VAT_NUMBER,
    patterns=(re.compile(r"\bGB ?\d{3} ?\d{4} ?\d{2}(?: ?\d{3})?\b"),),
)

COMPANY_NUMBER_PATTERN = EntityPattern(
    kind=EntityKind.COMPANY_NUMBER,
    patterns=(
        re.compile(
            r"(?i:(?:company|registered|registration)(?: registration)?"
            r" (?:no\.?|number))\s*[:#]?\s*([A-Z]{2}\d{6}|\d{8})\b"
        ),
    ),
    group=1,
)

INVOICE_NUMBER_PATTERN = EntityPattern(
    kind=EntityKind.INVOICE_NUMBER,
    patterns=(
        re.compile(
            r"(?i:invoice\s*(?:no\.?|number|#|ref(?:erence)?))\s*[:#]?\s*"
            r"([A-Za-z0-9][A-Za-z0-9\-/]{2,})"
        ),
    ),
    group=1,
)

ACCOUNT_NUMBER_PATTERN = EntityPattern(
    kind=EntityKind.ACCOUNT_NUMBER,
    patterns=(re.compile(r"(?i:account\s*(?:no\.?|number|#))\s*[:#]?\s*(\d{6,10})\b"),),
    group=1,
)

PERSON_PATTERN = EntityPattern(
    kind=EntityKind.PERSON,
    patterns=(re.compile(r"\b(?:Mr|Mrs|Ms|Miss|Dr|Prof)\.?[ ]+[A-Z][a-z]+(?:[ ]+[A-Z][a-z]+)?"),),
)

ORGANISATION_PATTERN = EntityPattern(
    kind=EntityKind.ORGANISATION,
    patterns=(
        re.compile(
            r"\b(?:[A-Z][A-Za-z&]*[ ]+){0,4}[A-Z][A-Za-z&]*[ ]+"
            r"(?:Ltd|Limited|PLC|plc|LLP|Inc|Corporation|Group)\b"
        ),
    ),
)

URL_PATTERN = EntityPattern(
    kind=EntityKind.URL,
    patterns=(re.compile(r"\bhttps?://[^\s<>\"')]+|\bwww\.[^\s<>\"')]+"),),
    strip_chars=".,;:",
)


def _unique(values: Iterable[str]) -> List[str]:
    """Drop duplicates (case-sensitive), keeping first-occurrence order."""
    seen: set[str] = set()
    result: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def _find(pattern: EntityPattern, text: str) -> List[str]:
    """Run every regex of a pattern and return unique values in text order."""
    if not isinstance(text, str) or not text:
        return []

    hits: list[tuple[int, str]] = []
    for regex in pattern.patterns:
        for match in regex.finditer(text):
            value = match.group(pattern.group).strip()
            if pattern.strip_chars:
                value = value.rstrip(pattern.strip_chars)
            hits.append((match.start(pattern.group), value))

    hits.sort(key=lambda hit: hit[0])
    return _unique(value for _, value in hits)


def extract_emails(text: str) -> List[str]:
    return _find(EMAIL_PATTERN, text)


def extract_phones(text: str) -> List[str]:
    return _find(PHONE_PATTERN, text)


def extract_dates(text: str) -> List[str]:
    return _find(DATE_PATTERN, text)


def extract_currencies(text: str) -> List[str]:
    return _find(CURRENCY_PATTERN, text)


def extract_postcodes(text: str) -> List[str]:
    return _find(POSTCODE_PATTERN, text)


def extract_ni_numbers(text: str) -> List[str]:
    return _find(NI_NUMBER_PATTERN, text)


def extract_vat_numbers(text: str) -> List[str]:
    return _find(VAT_NUMBER_PATTERN, text)


def extract_company_numbers(text: str) -> List[str]:
    return _find(COMPANY_NUMBER_PATTERN, text)


def extract_invoice_numbers(text: str) -> List[str]:
    return _find(INVOICE_NUMBER_PATTERN, text)


def extract_account_numbers(text: str) -> List[str]:
    return _find(ACCOUNT_NUMBER_PATTERN, text)


def extract_people(text: str) -> List[str]:
    return _find(PERSON_PATTERN, text)


def extract_organisations(text: str) -> List[str]:
    return _find(ORGANISATION_PATTERN, text)


def extract_urls(text: str) -> List[str]:
    return _find(URL_PATTERN, text)


EXTRACTORS: Dict[EntityKind, Callable[[str], List[str]]] = {
    EntityKind.EMAIL: extract_emails,
    EntityKind.PHONE: extract_phones,
    EntityKind.POSTCODE: extract_postcodes,
    EntityKind.CURRENCY: extract_currencies,
    EntityKind.NI_NUMBER: extract_ni_numbers,
    EntityKind.DATE: extract_dates,
    EntityKind.VAT_NUMBER: extract_vat_numbers,
    EntityKind.COMPANY_NUMBER: extract_company_numbers,
    EntityKind.INVOICE_NUMBER: extract_invoice_numbers,
    EntityKind.ACCOUNT_NUMBER: extract_account_numbers,
    EntityKind.PERSON: extract_people,
    EntityKind.ORGANISATION: extract_organisations,
    EntityKind.URL: extract_urls,
}


class EntityExtractor:
    """
    Regex-based entity extractor.

    Runs every per-kind extraction function over the text. Extraction
    never raises; unmatched kinds map to an empty list.
    """

    def __init__(self, kinds: Optional[Iterable[EntityKind]] = None):
        self._kinds = list(kinds) if kinds is not None else list(EXTRACTORS)

    def extract(self, text: str) -> EntityMap:
        """
        Extract all entities from text.

        Args:
            text: Raw text to scan.

        Returns:
            Map of every EntityKind to its unique values in order of
            first occurrence.
        """
        entities = empty_entity_map()
        for kind in self._kinds:
            entities[kind] = EXTRACTORS[kind](text)
        return entities

    def extract_kind(self, text: str, kind: EntityKind) -> List[str]:
        """Extract a single entity kind."""
        return EXTRACTORS[kind](text)

    @staticmethod
    def count_kinds(entities: EntityMap) -> int:
        """Number of entity kinds with at least one value."""
        return sum(1 for values in entities.values() if values)

    @staticmethod
    def total_entities(entities: EntityMap) -> int:
        """Total number of values across all kinds."""
        return sum(len(values) for values in entities.values())
