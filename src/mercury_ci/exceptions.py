"""Custom exceptions for Mercury CI."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class MercuryError(Exception):
    """
    Base exception for Mercury CI errors.

    Carries a human-readable message plus optional context so that callers
    (the HTTP layer in particular) can report the failure without parsing
    strings.

    Attributes:
        message: Human-readable error description.
        file_name: Name of the file involved, if any.
        details: Additional error details.
    """
    message: str
    file_name: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.file_name:
            parts.append(f"File: {self.file_name}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "file_name": self.file_name,
            "details": self.details,
        }


@dataclass
class ExtractionError(MercuryError):
    """Raised when text cannot be extracted from an uploaded file."""


@dataclass
class UnsupportedFileTypeError(MercuryError):
    """
    Raised when an upload has an extension the system does not accept.

    The batch upload path catches this and reports the rejection instead
    of adding the file to the collection.
    """

    def get_supported_extensions(self) -> list[str]:
        """Return list of supported extensions."""
        return self.details.get("supported_extensions", [])


@dataclass
class InvalidTransitionError(MercuryError):
    """Raised when an uploaded file is moved to a status it cannot reach."""


@dataclass
class StorageError(MercuryError):
    """Raised when the key-value store cannot be written."""


@dataclass
class NotFoundError(MercuryError):
    """Raised when a stored item id does not exist."""


@dataclass
class AnalysisUnavailableError(MercuryError):
    """Raised when an operation needs an analysis result the file does not have yet."""
