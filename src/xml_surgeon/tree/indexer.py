"""Structural indexing of XML documents from a token stream.

The indexer walks the document once and produces an ordered list of element
records carrying path, depth, attributes and leading text. No tree of nodes
is built: ancestry is tracked with a stack of open element names, and records
are discarded by the caller once used.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from xml_surgeon.shared.config import DEFAULT_PREVIEW_LENGTH
from xml_surgeon.shared.logging import get_logger
from xml_surgeon.tokenization import (
    MarkupParseError,
    MarkupTokenizer,
    Token,
    TokenPosition,
    TokenType,
)

PATH_SEPARATOR = "/"
ELLIPSIS = "..."


@dataclass
class ElementRecord:
    """Transient description of one element observed during a traversal."""

    path: str
    name: str
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    text: Optional[str] = None
    depth: int = 0

    def __post_init__(self) -> None:
        """Validate element record."""
        if not self.name:
            raise ValueError("Element name cannot be empty")
        if self.depth < 0:
            raise ValueError("Element depth must be >= 0")
        if self.path.rsplit(PATH_SEPARATOR, 1)[-1] != self.name:
            raise ValueError("Element path must end with the element name")

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value of attribute ``name``."""
        for attr_name, value in self.attributes:
            if attr_name == name:
                return value
        return default

    def display(self, preview_length: int = DEFAULT_PREVIEW_LENGTH) -> str:
        """Format the element for a tool-calling consumer.

        Renders ``path [a="v", ...]: "text preview"``. The attribute clause is
        omitted when there are no attributes, the text is cut to
        ``preview_length`` characters followed by an ellipsis, and newlines are
        shown as a literal backslash-n.
        """
        attrs = ""
        if self.attributes:
            rendered = ", ".join(f'{name}="{value}"' for name, value in self.attributes)
            attrs = f" [{rendered}]"

        text_preview = ""
        if self.text is not None:
            preview = self.text
            if len(preview) > preview_length:
                preview = preview[:preview_length] + ELLIPSIS
            escaped = preview.replace("\n", "\\n")
            text_preview = f': "{escaped}"'

        return f"{self.path}{attrs}{text_preview}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert element record to dictionary representation."""
        return {
            "path": self.path,
            "name": self.name,
            "attributes": [list(pair) for pair in self.attributes],
            "text": self.text,
            "depth": self.depth,
        }

    def __str__(self) -> str:
        return self.display()


class TagStack:
    """Stack of currently open elements with balance checking.

    Shared by the indexer and every mutator so that all traversals agree on
    what a well-formed document is.
    """

    def __init__(self) -> None:
        self._names: List[str] = []
        self._positions: List[TokenPosition] = []

    def __len__(self) -> int:
        return len(self._names)

    @property
    def depth(self) -> int:
        """Depth a newly opened element would have."""
        return len(self._names)

    @property
    def path(self) -> str:
        """Path of the innermost open element."""
        return PATH_SEPARATOR.join(self._names)

    def path_for(self, name: str) -> str:
        """Path an element named ``name`` would have if opened now."""
        return PATH_SEPARATOR.join([*self._names, name])

    def push(self, token: Token) -> None:
        self._names.append(token.name or "")
        self._positions.append(token.position)

    def pop(self, token: Token) -> str:
        """Close the innermost element, checking it matches ``token``.

        Raises:
            MarkupParseError: If nothing is open or the names differ
        """
        if not self._names:
            raise MarkupParseError(
                f"Closing tag </{token.name}> has no matching opening tag",
                token.position
            )
        expected = self._names[-1]
        if token.name != expected:
            raise MarkupParseError(
                f"Closing tag </{token.name}> does not match open element <{expected}>",
                token.position
            )
        self._positions.pop()
        return self._names.pop()

    def finish(self) -> None:
        """Check that every element was closed at end of input.

        Raises:
            MarkupParseError: Pointing at the innermost unclosed element
        """
        if self._names:
            raise MarkupParseError(
                f"Element <{self._names[-1]}> is never closed", self._positions[-1]
            )


class StructuralIndexer:
    """Produce element records from one forward pass over a document."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.tokenizer = MarkupTokenizer(correlation_id)
        self.logger = get_logger(__name__, correlation_id, "structural_indexer")

    def index(self, content: str) -> List[ElementRecord]:
        """Index every element of ``content`` in document order.

        Raises:
            MarkupParseError: If the document is malformed; no records are
                returned in that case
        """
        start_time = time.time()
        records: List[ElementRecord] = []
        open_records: List[ElementRecord] = []
        stack = TagStack()

        for token in self.tokenizer.tokenize(content):
            if token.type == TokenType.START_TAG:
                record = self._make_record(token, stack)
                records.append(record)
                open_records.append(record)
                stack.push(token)
            elif token.type == TokenType.EMPTY_TAG:
                records.append(self._make_record(token, stack))
            elif token.type == TokenType.END_TAG:
                stack.pop(token)
                open_records.pop()
            elif token.is_character_data and open_records:
                # First non-blank run directly inside the innermost element wins
                current = open_records[-1]
                if current.text is None:
                    stripped = token.text.strip()
                    if stripped:
                        current.text = stripped
        stack.finish()

        self.logger.debug(
            "Structure indexed",
            extra={
                "element_count": len(records),
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )
        return records

    @staticmethod
    def _make_record(token: Token, stack: TagStack) -> ElementRecord:
        name = token.name or ""
        return ElementRecord(
            path=stack.path_for(name),
            name=name,
            attributes=token.attribute_pairs(),
            depth=stack.depth,
        )


def get_structure(
    content: str, correlation_id: Optional[str] = None
) -> List[ElementRecord]:
    """Index ``content`` and return all element records in document order."""
    return StructuralIndexer(correlation_id).index(content)
