"""Configuration Manager implementation for Mercury CI.

Loads application settings from a dictionary, a JSON file or ``MERCURY_*``
environment variables, validates them and exposes the resulting AppConfig.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .models import (
    DEFAULT_SUPPORTED_EXTENSIONS,
    LOG_LEVELS,
    AppConfig,
    ConfigurationError,
    StorageBackend,
    ValidationResult,
)

ENV_PREFIX = "MERCURY_"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Environment variable suffix -> (config key, parser)
ENV_FIELDS = {
    "STORAGE_BACKEND": ("storage_backend", str),
    "DATABASE_URL": ("database_url", str),
    "EXPORT_DIR": ("export_dir", str),
    "LOG_LEVEL": ("log_level", str),
    "DEFAULT_SOURCES": ("default_sources", lambda v: [s.strip() for s in v.split(",") if s.strip()]),
    "RANDOM_SEED": ("random_seed", str),
    "SUPPORTED_EXTENSIONS": (
        "supported_extensions", lambda v: [s.strip() for s in v.split(",") if s.strip()]
    ),
}


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with the standard Mercury format."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


class ConfigurationManager:
    """
    Manager for application configuration.

    Handles loading, validation, and access to the AppConfig.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self._configuration = config or AppConfig()
        self._is_loaded = config is not None

    @property
    def configuration(self) -> AppConfig:
        """Get the current configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    def load(self, source: Union[str, Path, Dict[str, Any]]) -> ValidationResult:
        """
        Load and validate configuration.

        Args:
            source: JSON file path or dictionary of settings.

        Returns:
            ValidationResult with any warnings.

        Raises:
            ConfigurationError: If the file is missing or validation fails.
        """
        raw_data = self._parse_source(source)
        if not isinstance(raw_data, dict):
            raise ConfigurationError("Configuration must be a JSON object")

        result, config = self._validate_config(raw_data)
        if not result.is_valid:
            raise ConfigurationError("Configuration validation failed", validation_result=result)

        self._configuration = config
        self._is_loaded = True
        return result

    def load_from_env(self, environ: Optional[Mapping[str, str]] = None) -> ValidationResult:
        """
        Load configuration from ``MERCURY_*`` environment variables.

        Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {}
        for suffix, (key, parse) in ENV_FIELDS.items():
            value = environ.get(f"{ENV_PREFIX}{suffix}")
            if value is not None and value != "":
                data[key] = parse(value)
        return self.load(data)

    def save_to_file(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._configuration.to_dict(), f, indent=2, ensure_ascii=False)

    def to_dict(self) -> Dict[str, Any]:
        return self._configuration.to_dict()

    def _validate_config(
        self, data: Dict[str, Any]
    ) -> Tuple[ValidationResult, Optional[AppConfig]]:
        """Validate a settings dictionary and build an AppConfig."""
        result = ValidationResult(is_valid=True)
        defaults = AppConfig()
        known = set(defaults.to_dict().keys())

        for key in data:
            if key not in known:
                result.add_warning(f"Unknown configuration key '{key}' ignored")

        backend = data.get("storage_backend", defaults.storage_backend.value)
        valid_backends = [b.value for b in StorageBackend]
        if backend not in valid_backends:
            result.add_error(f"'storage_backend' must be one of {valid_backends}")

        database_url = data.get("database_url", defaults.database_url)
        if not isinstance(database_url, str) or not database_url.strip():
            result.add_error("'database_url' must be a non-empty string")

        export_dir = data.get("export_dir", defaults.export_dir)
        if not isinstance(export_dir, str) or not export_dir.strip():
            result.add_error("'export_dir' must be a non-empty string")

        log_level = str(data.get("log_level", defaults.log_level)).upper()
        if log_level not in LOG_LEVELS:
            result.add_error(f"'log_level' must be one of {LOG_LEVELS}")

        sources = data.get("default_sources", defaults.default_sources)
        if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
            result.add_error("'default_sources' must be a list of strings")
        elif not sources:
            result.add_error("'default_sources' must not be empty")

        seed = data.get("random_seed", defaults.random_seed)
        if seed is not None:
            try:
                seed = int(seed)
            except (TypeError, ValueError):
                result.add_error("'random_seed' must be an integer")

        extensions = data.get("supported_extensions", defaults.supported_extensions)
        if not isinstance(extensions, list) or not all(isinstance(e, str) for e in extensions):
            result.add_error("'supported_extensions' must be a list of strings")
        else:
            unknown = [
                e for e in extensions
                if e.lower().lstrip(".") not in DEFAULT_SUPPORTED_EXTENSIONS
            ]
            if unknown:
                result.add_error(
                    f"'supported_extensions' contains types that cannot be analysed: {unknown}"
                )

        if not result.is_valid:
            return result, None

        config = AppConfig(
            storage_backend=StorageBackend(backend),
            database_url=database_url.strip(),
            export_dir=export_dir.strip(),
            log_level=log_level,
            default_sources=[s.strip().lower() for s in sources],
            random_seed=seed,
            supported_extensions=list(extensions),
        )
        return result, config

    def _parse_source(
        self, source: Union[str, Path, Dict[str, Any]]
    ) -> Any:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            with open(path, "r", encoding="utf-8") as f:
                try:
                    return json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}")

        return source
