"""Keyword-based document classification.

Infers a document type from the file name and content, plus the issuer and
recipient from simple ``label: value`` lines. Classification is ordered and
deterministic: the first type in ``DOCUMENT_TYPE_KEYWORDS`` with any keyword
hit wins.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

DEFAULT_DOCUMENT_TYPE = "Document"

DOCUMENT_TYPE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Invoice", ("invoice", "amount due", "payment terms", "bill to")),
    ("Receipt", ("receipt", "amount paid", "thank you for your purchase")),
    ("Statement", ("statement", "opening balance", "closing balance")),
    ("Contract", ("contract", "agreement", "terms and conditions", "hereby agree")),
    ("Report", ("report", "executive summary", "findings", "analysis")),
    ("Letter", ("letter", "dear ", "yours sincerely", "yours faithfully", "kind regards")),
]

ISSUER_PATTERNS = [
    re.compile(r"^\s*from\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*sent by\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*issued by\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
]

RECIPIENT_PATTERNS = [
    re.compile(r"^\s*to\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*dear\s+(.+)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*addressed to\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
]

MAX_TITLE_LENGTH = 120


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one document."""
    doc_type: str
    issuer: Optional[str] = None
    recipient: Optional[str] = None


class DocumentClassifier:
    """
    Classifies documents by keyword and pulls out issuer/recipient labels.

    Holds no state between calls, so classifying the same input twice
    always gives the same answer.
    """

    def classify(self, file_name: str, content: str) -> Classification:
        """
        Classify a document.

        Args:
            file_name: Original file name.
            content: Extracted text content.

        Returns:
            Classification with doc type, issuer and recipient.
        """
        return Classification(
            doc_type=self.detect_type(file_name, content),
            issuer=self.extract_issuer(content),
            recipient=self.extract_recipient(content),
        )

    def detect_type(self, file_name: str, content: str = "") -> str:
        """Return the first document type whose keywords appear."""
        name_lower = (file_name or "").lower()
        content_lower = (content or "").lower()

        for doc_type, keywords in DOCUMENT_TYPE_KEYWORDS:
            for keyword in keywords:
                if keyword in name_lower or keyword in content_lower:
                    return doc_type
        return DEFAULT_DOCUMENT_TYPE

    def extract_issuer(self, content: str) -> Optional[str]:
        return self._first_label_match(ISSUER_PATTERNS, content)

    def extract_recipient(self, content: str) -> Optional[str]:
        return self._first_label_match(RECIPIENT_PATTERNS, content)

    def extract_title(self, content: str) -> Optional[str]:
        """Use the first non-empty line as a title when it is short enough."""
        for line in (content or "").splitlines():
            line = line.strip()
            if line:
                return line if len(line) <= MAX_TITLE_LENGTH else None
        return None

    def _first_label_match(self, patterns: List[re.Pattern], content: str) -> Optional[str]:
        """Return the earliest line matched by any of the label patterns."""
        if not content:
            return None

        best: Optional[Tuple[int, str]] = None
        for pattern in patterns:
            match = pattern.search(content)
            if not match:
                continue
            value = match.group(1).strip().rstrip(",").strip()
            if value and (best is None or match.start() < best[0]):
                best = (match.start(), value)
        return best[1] if best else None
