"""Enumerations for Mercury CI."""

from enum import Enum


class EntityKind(Enum):
    """Kinds of entities pulled out of free text."""
    EMAIL = "email"
    PHONE = "phone"
    POSTCODE = "postcode"
    CURRENCY = "currency"
    NI_NUMBER = "ni_number"
    DATE = "date"
    VAT_NUMBER = "vat_number"
    COMPANY_NUMBER = "company_number"
    INVOICE_NUMBER = "invoice_number"
    ACCOUNT_NUMBER = "account_number"
    PERSON = "person"
    ORGANISATION = "organisation"
    URL = "url"

    @property
    def plural(self) -> str:
        """Key used for this kind in serialized entity maps."""
        return _ENTITY_PLURALS[self]

    @classmethod
    def from_plural(cls, key: str) -> "EntityKind":
        for kind, plural in _ENTITY_PLURALS.items():
            if plural == key:
                return kind
        return cls(key)


_ENTITY_PLURALS = {
    EntityKind.EMAIL: "emails",
    EntityKind.PHONE: "phones",
    EntityKind.POSTCODE: "postcodes",
    EntityKind.CURRENCY: "currencies",
    EntityKind.NI_NUMBER: "niNumbers",
    EntityKind.DATE: "dates",
    EntityKind.VAT_NUMBER: "vatNumbers",
    EntityKind.COMPANY_NUMBER: "companyNumbers",
    EntityKind.INVOICE_NUMBER: "invoiceNumbers",
    EntityKind.ACCOUNT_NUMBER: "accountNumbers",
    EntityKind.PERSON: "people",
    EntityKind.ORGANISATION: "organisations",
    EntityKind.URL: "urls",
}


class DataQuality(Enum):
    """Coarse quality rating attached to an analysis."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ColumnType(Enum):
    """Inferred type of a CSV column."""
    NUMERIC = "numeric"
    DATE = "date"
    TEXT = "text"


class DataDomain(Enum):
    """Business domain inferred from CSV headers."""
    FINANCIAL = "financial"
    SALES = "sales"
    MARKETING = "marketing"
    HR = "hr"
    OPERATIONS = "operations"
    GENERAL = "general"


class SourceType(Enum):
    """Which analysis path produced a result."""
    CSV = "csv"
    TEXT = "text"
    DOCUMENT = "document"
    BINARY = "binary"


class FileStatus(Enum):
    """Lifecycle of an uploaded file."""
    UPLOADED = "uploaded"
    ANALYSING = "analysing"
    PROCESSED = "processed"
    ERROR = "error"

    def can_transition_to(self, target: "FileStatus") -> bool:
        """Check whether moving from this status to ``target`` is allowed."""
        return target in _FILE_TRANSITIONS[self]


_FILE_TRANSITIONS = {
    FileStatus.UPLOADED: {FileStatus.ANALYSING},
    FileStatus.ANALYSING: {FileStatus.PROCESSED, FileStatus.ERROR},
    FileStatus.PROCESSED: set(),
    FileStatus.ERROR: set(),
}
