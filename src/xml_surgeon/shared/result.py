"""Result objects for streaming XML traversals and edits.

This module defines the outcome of a single mutation pass and the history
entries a document keeps for every successful edit.
"""

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PerformanceMetrics:
    """Performance metrics for one traversal."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_processed: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_processed * 1000.0) / self.processing_time_ms


@dataclass
class MutationOutcome:
    """Result of a single mutation pass.

    ``content`` holds the complete rewritten document and is only present when
    the pattern matched; an unmatched pass never produces text.
    """

    matched: bool
    content: Optional[str] = None
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    def __post_init__(self) -> None:
        """Validate outcome consistency."""
        if self.matched and self.content is None:
            raise ValueError("A matched outcome must carry rewritten content")
        if not self.matched and self.content is not None:
            raise ValueError("An unmatched outcome must not carry content")


@dataclass
class EditRecord:
    """One successful edit applied to a document."""

    kind: str
    pattern: str
    summary: str
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.summary:
            raise ValueError("Edit summary cannot be empty")

    def __str__(self) -> str:
        return self.summary
