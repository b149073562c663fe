"""Shared utilities for streaming XML editing.

This module provides shared configuration objects, result types and logging
helpers used across all processing layers.
"""

from .result import (
    EditRecord,
    MutationOutcome,
    PerformanceMetrics,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    EditorConfig,
    GlobalConfig,
    PersistenceConfig,
    QueryConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "EditRecord",
    "MutationOutcome",
    "PerformanceMetrics",
    "ConfigError",
    "ConfigValidationError",
    "EditorConfig",
    "GlobalConfig",
    "PersistenceConfig",
    "QueryConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]
