"""
Configuration management for the web crawler.
"""

import json
import os
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Pattern, TextIO, Tuple

from jsonschema import validate, ValidationError as SchemaValidationError

from webcrawler.utils.errors import ConfigurationError
from webcrawler.utils.logging import get_logger
from webcrawler.utils.patterns import compile_patterns


logger = get_logger(__name__)

LOG_LEVEL_ENV = "WEBCRAWLER_LOG_LEVEL"


def _default_parallelism() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class CrawlerConfiguration:
    """Validated crawler configuration."""
    start_pages: Tuple[str, ...] = ()
    ignored_urls: Tuple[Pattern, ...] = ()
    ignored_words: Tuple[Pattern, ...] = ()
    parallelism: int = field(default_factory=_default_parallelism)
    max_depth: int = 0
    timeout_seconds: int = 1
    popular_word_count: int = 0
    profile_output_path: str = ""
    result_path: str = ""
    log_level: str = "INFO"

    def with_overrides(self, **kwargs) -> "CrawlerConfiguration":
        """Return a copy with specific fields overridden."""
        return replace(self, **kwargs)


# Configuration schema for validation
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "startPages": {
            "type": "array",
            "items": {"type": "string", "minLength": 1}
        },
        "ignoredUrls": {
            "type": "array",
            "items": {"type": "string"}
        },
        "ignoredWords": {
            "type": "array",
            "items": {"type": "string"}
        },
        "parallelism": {"type": "integer", "minimum": 1},
        "maxDepth": {"type": "integer", "minimum": 0},
        "timeoutSeconds": {"type": "integer", "minimum": 1},
        "popularWordCount": {"type": "integer", "minimum": 0},
        "profileOutputPath": {"type": "string"},
        "resultPath": {"type": "string"},
        "logLevel": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        }
    },
    "additionalProperties": False
}

# JSON key -> CrawlerConfiguration field
_FIELD_NAMES = {
    "startPages": "start_pages",
    "ignoredUrls": "ignored_urls",
    "ignoredWords": "ignored_words",
    "parallelism": "parallelism",
    "maxDepth": "max_depth",
    "timeoutSeconds": "timeout_seconds",
    "popularWordCount": "popular_word_count",
    "profileOutputPath": "profile_output_path",
    "resultPath": "result_path",
    "logLevel": "log_level",
}


class ConfigManager:
    """Loads and validates crawler configuration from a JSON file."""

    def __init__(self, config_path: str = "config.json"):
        self.config_path = Path(config_path)
        self._config: Optional[CrawlerConfiguration] = None
        self._lock = threading.RLock()

    @staticmethod
    def validate_config(config_data: Dict[str, Any]) -> None:
        """Validate configuration data against schema."""
        try:
            validate(instance=config_data, schema=CONFIG_SCHEMA)
        except SchemaValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e.message}",
                {"path": list(e.absolute_path)}
            ) from e

    def load_config(self) -> CrawlerConfiguration:
        """
        Load configuration from the JSON file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        with self._lock:
            if not self.config_path.exists():
                raise ConfigurationError(f"Configuration file not found: {self.config_path}")
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    self._config = self.read(f)
            except OSError as e:
                raise ConfigurationError(
                    f"Failed to read configuration: {e}",
                    {"config_path": str(self.config_path)}
                ) from e

            logger.info(f"Configuration loaded and validated from {self.config_path}")
            return self._config

    @classmethod
    def read(cls, stream: TextIO) -> CrawlerConfiguration:
        """Load configuration from an open JSON text stream."""
        try:
            config_data = json.load(stream)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration: {e}") from e
        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> CrawlerConfiguration:
        """
        Build a configuration from a mapping using the JSON key names.

        Raises:
            ConfigurationError: If the data fails schema validation or holds an invalid pattern
        """
        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration must be a JSON object")
        cls.validate_config(config_data)

        values: Dict[str, Any] = {}
        for key, value in config_data.items():
            values[_FIELD_NAMES[key]] = value

        if "start_pages" in values:
            values["start_pages"] = tuple(values["start_pages"])
        if "ignored_urls" in values:
            values["ignored_urls"] = tuple(compile_patterns(values["ignored_urls"]))
        if "ignored_words" in values:
            values["ignored_words"] = tuple(compile_patterns(values["ignored_words"]))

        config = CrawlerConfiguration(**values)
        return cls._override_with_env_vars(config)

    @staticmethod
    def _override_with_env_vars(config: CrawlerConfiguration) -> CrawlerConfiguration:
        """Override configuration with environment variables."""
        log_level = os.getenv(LOG_LEVEL_ENV)
        if log_level:
            level = log_level.strip().upper()
            if level not in CONFIG_SCHEMA["properties"]["logLevel"]["enum"]:
                raise ConfigurationError(f"Invalid {LOG_LEVEL_ENV}: {log_level}")
            config = config.with_overrides(log_level=level)
        return config

    @property
    def config(self) -> CrawlerConfiguration:
        """Get the loaded configuration."""
        with self._lock:
            if self._config is None:
                raise ConfigurationError("Configuration not loaded. Call load_config() first.")
            return self._config


def load_config(config_path: str) -> CrawlerConfiguration:
    """Load configuration from file."""
    return ConfigManager(config_path).load_config()


def export_config(config: CrawlerConfiguration) -> Dict[str, Any]:
    """Convert a configuration back to its JSON shape."""
    data: Dict[str, Any] = {}
    for key, field_name in _FIELD_NAMES.items():
        value = getattr(config, field_name)
        if field_name in ("ignored_urls", "ignored_words"):
            value = [p.pattern for p in value]
        elif field_name == "start_pages":
            value = list(value)
        data[key] = value
    return data
