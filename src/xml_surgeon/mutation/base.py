"""Common bookkeeping for one-pass mutators.

Each mutator owns its own scan loop; this module only provides timing,
outcome construction and the small markup builders they share.
"""

import time
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Sequence, Tuple

from xml_surgeon.query.pattern import Pattern, parse_pattern
from xml_surgeon.shared.logging import get_logger
from xml_surgeon.shared.result import MutationOutcome, PerformanceMetrics
from xml_surgeon.tokenization import (
    MarkupTokenizer,
    Token,
    escape_attribute,
    escape_text,
    is_valid_name,
)

EMPTY_TAG_CLOSE = "/>"


class Mutator(ABC):
    """Base class for a single-match, single-pass document rewrite."""

    component = "mutator"

    def __init__(self, pattern: str, correlation_id: Optional[str] = None) -> None:
        self.pattern_text = pattern
        self.pattern: Pattern = parse_pattern(pattern)
        self.correlation_id = correlation_id
        self.tokenizer = MarkupTokenizer(correlation_id)
        self.logger = get_logger(__name__, correlation_id, self.component)
        self.tokens_processed = 0

    def run(self, content: str) -> MutationOutcome:
        """Rewrite ``content`` at the first element matching the pattern.

        The whole input is scanned (and checked for balance) before an
        outcome is returned, so a malformed document never yields text.

        Raises:
            MarkupParseError: If the document is malformed
        """
        start_time = time.time()
        self.tokens_processed = 0
        pieces, matched = self._transform(content)

        metrics = PerformanceMetrics(
            processing_time_ms=(time.time() - start_time) * 1000,
            characters_processed=len(content),
            tokens_processed=self.tokens_processed,
        )
        if self.logger.is_debug_enabled():
            self.logger.debug(
                "Mutation pass completed",
                extra={
                    "pattern": self.pattern_text,
                    "matched": matched,
                    "tokens_processed": metrics.tokens_processed,
                    "processing_time_ms": metrics.processing_time_ms,
                    "tokens_per_second": metrics.tokens_per_second,
                    "characters_per_second": metrics.characters_per_second,
                }
            )
        return MutationOutcome(
            matched=matched,
            content="".join(pieces) if matched else None,
            metrics=metrics,
        )

    def _tokens(self, content: str) -> Iterator[Token]:
        for token in self.tokenizer.tokenize(content):
            self.tokens_processed += 1
            yield token

    def _is_match(self, token: Token, path: str) -> bool:
        return self.pattern.matches(path, token.name or "", token.attribute_pairs())

    @abstractmethod
    def _transform(self, content: str) -> Tuple[List[str], bool]:
        """Return the output pieces and whether the target was found."""


def expand_empty_tag(token: Token) -> str:
    """Turn ``<name .../>`` into ``<name ...>`` keeping every other byte."""
    return token.raw[:-len(EMPTY_TAG_CLOSE)] + ">"


def end_tag(name: str) -> str:
    return f"</{name}>"


def validate_name(name: str, kind: str) -> None:
    """Raise ``ValueError`` if ``name`` is not a usable XML name."""
    if not is_valid_name(name):
        raise ValueError(f"Invalid {kind} name: {name!r}")


def render_element(
    name: str,
    attributes: Sequence[Tuple[str, str]] = (),
    text: Optional[str] = None
) -> str:
    """Serialize a new element, self-closing when it has no text."""
    rendered_attrs = "".join(
        f' {attr_name}="{escape_attribute(value)}"' for attr_name, value in attributes
    )
    if text is None:
        return f"<{name}{rendered_attrs}/>"
    return f"<{name}{rendered_attrs}>{escape_text(text)}{end_tag(name)}"
