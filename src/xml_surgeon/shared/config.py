"""Configuration classes for streaming XML editing.

This module provides configuration objects for the query, persistence and
global layers, enabling control over result bounds, commit behavior and
logging.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .logging import LOG_LEVELS

# Default bound on elements returned to resource-constrained consumers
DEFAULT_MAX_RESULTS = 10
DEFAULT_PREVIEW_LENGTH = 50


@dataclass
class QueryConfig:
    """Configuration for structure enumeration and pattern queries."""

    max_results: int = DEFAULT_MAX_RESULTS
    preview_length: int = DEFAULT_PREVIEW_LENGTH

    def __post_init__(self) -> None:
        """Validate query configuration."""
        if self.max_results <= 0:
            raise ValueError("max_results must be > 0")
        if self.preview_length <= 0:
            raise ValueError("preview_length must be > 0")


@dataclass
class PersistenceConfig:
    """Configuration for loading and committing documents."""

    temp_suffix: str = ".tmp"
    fsync: bool = True
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate persistence configuration."""
        if not self.temp_suffix:
            raise ValueError("temp_suffix must not be empty")
        if "/" in self.temp_suffix:
            raise ValueError("temp_suffix must not contain a path separator")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {self.encoding}") from e


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "INFO"
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in LOG_LEVELS:
            raise ValueError(f"logging_level must be one of {list(LOG_LEVELS)}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = ("query", "persistence", "global_")


@dataclass(frozen=True)
class EditorConfig:
    """Complete configuration for an editing session.

    Immutable; use ``override`` to derive variants.
    """

    query: QueryConfig = field(default_factory=QueryConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete editor configuration."""
        try:
            for component in _COMPONENTS:
                getattr(self, component).__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.query.preview_length < 4:
            raise ConfigValidationError(
                "preview_length must leave room for an ellipsis",
                field_name="query.preview_length",
                suggestions=["Use a preview_length of at least 4"],
            )

    def override(self, **kwargs: Any) -> "EditorConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = EditorConfig()
            >>> config.override(query__max_results=25).query.max_results
            25
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                # global_ ends in an underscore, so match known prefixes first
                component = next(
                    (name for name in _COMPONENTS if key.startswith(name + "__")),
                    key.split("__", 1)[0],
                )
                field_name = key[len(component) + 2:]
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS:
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for field_name in self.__dataclass_fields__:
            value = getattr(self, field_name)
            if hasattr(value, "__dataclass_fields__"):
                value = {
                    name: getattr(value, name) for name in value.__dataclass_fields__
                }
            result[field_name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create configuration from dictionary.

        Unknown keys raise ``ConfigValidationError`` rather than being dropped.
        """
        component_types = {
            "query": QueryConfig,
            "persistence": PersistenceConfig,
            "global_": GlobalConfig,
        }
        field_values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_types:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"{key} must be a mapping", field_name=key
                    )
                try:
                    field_values[key] = component_types[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in ("name", "description"):
                field_values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}", field_name=key
                )
        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "EditorConfig":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "EditorConfig":
        """Create the default configuration (10 results, 50-character previews)."""
        return cls(name="default")

    @classmethod
    def compact(cls) -> "EditorConfig":
        """Create a preset for consumers with very small context windows."""
        return cls(
            query=QueryConfig(max_results=5, preview_length=30),
            name="compact",
            description="Smaller result bound and previews for tight context budgets",
        )
