"""Configuration management for Mercury CI."""

from .config_manager import ConfigurationManager, configure_logging
from .models import (
    AppConfig,
    ConfigurationError,
    StorageBackend,
    ValidationResult,
)

__all__ = [
    "ConfigurationManager",
    "configure_logging",
    "AppConfig",
    "ConfigurationError",
    "StorageBackend",
    "ValidationResult",
]
