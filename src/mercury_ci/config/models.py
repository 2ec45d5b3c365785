"""Data models for configuration management."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

DEFAULT_DATABASE_URL = "sqlite:///data/mercury.db"
DEFAULT_SUPPORTED_EXTENSIONS = ["csv", "txt", "md", "pdf", "doc", "docx"]
DEFAULT_BRIEFING_SOURCES = ["news", "market", "social", "economic"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class StorageBackend(Enum):
    """Where collections are persisted."""
    MEMORY = "memory"
    SQL = "sql"


@dataclass
class AppConfig:
    """
    Application configuration.

    ``random_seed`` fixes briefing template choices; leave it unset in
    production.
    """
    storage_backend: StorageBackend = StorageBackend.MEMORY
    database_url: str = DEFAULT_DATABASE_URL
    export_dir: str = "data/exports"
    log_level: str = "INFO"
    default_sources: List[str] = field(default_factory=lambda: list(DEFAULT_BRIEFING_SOURCES))
    random_seed: Optional[int] = None
    supported_extensions: List[str] = field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_EXTENSIONS)
    )

    def __post_init__(self):
        if isinstance(self.storage_backend, str):
            self.storage_backend = StorageBackend(self.storage_backend)
        self.supported_extensions = [
            ext.lower().lstrip(".") for ext in self.supported_extensions
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "storage_backend": self.storage_backend.value,
            "database_url": self.database_url,
            "export_dir": self.export_dir,
            "log_level": self.log_level,
            "default_sources": list(self.default_sources),
            "random_seed": self.random_seed,
            "supported_extensions": list(self.supported_extensions),
        }


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result
