"""Editing session API with progressive disclosure.

Level 1 is the module functions ``load_string`` and ``load_file``; level 2 is
the ``MarkupDocument`` class, which owns the current content of one document
and applies queries and edits to it.

Every edit is a full one-pass rewrite of the current content. The rewritten
text replaces the old content only after the pass finished without error, so
a failed call never leaves the document half-edited.
"""

from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from xml_surgeon.mutation import (
    DeleteElement,
    EditOperation,
    InsertElement,
    SetAttribute,
    UpdateText,
    run_operation,
)
from xml_surgeon.persistence import atomic_write, read_document
from xml_surgeon.query import QueryExecutor
from xml_surgeon.shared import EditorConfig, EditRecord, get_logger
from xml_surgeon.tokenization import MarkupParseError
from xml_surgeon.tree import ElementRecord, StructuralIndexer

PathLike = Union[str, Path]
AttributeInput = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


class MarkupDocument:
    """A single XML document held as text, edited one match at a time.

    Not safe for concurrent mutation: callers serialize edits. Read-only
    methods may be called at any point between edits.

    Examples:
        >>> doc = MarkupDocument.from_string("<root><name>Old</name></root>")
        >>> doc.update_text("name", "New")
        True
        >>> doc.get_content()
        '<root><name>New</name></root>'
    """

    def __init__(
        self,
        content: str,
        source_path: Optional[PathLike] = None,
        config: Optional[EditorConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or EditorConfig()
        if not self.config.global_.enable_correlation_tracking:
            correlation_id = None
        self.correlation_id = correlation_id
        self.source_path = Path(source_path) if source_path is not None else None
        self.history: List[EditRecord] = []
        self.modified = False
        self._content = content
        self._indexer = StructuralIndexer(correlation_id)
        self._executor = QueryExecutor(self.config.query, correlation_id)
        self.logger = get_logger(__name__, correlation_id, "markup_document")

    @classmethod
    def from_string(
        cls,
        content: str,
        config: Optional[EditorConfig] = None,
        correlation_id: Optional[str] = None
    ) -> "MarkupDocument":
        return cls(content, config=config, correlation_id=correlation_id)

    @classmethod
    def from_file(
        cls,
        path: PathLike,
        config: Optional[EditorConfig] = None,
        correlation_id: Optional[str] = None
    ) -> "MarkupDocument":
        """Load a document from disk; the path becomes the default commit target.

        Raises:
            OSError: If the file cannot be read
        """
        config = config or EditorConfig()
        content = read_document(path, config.persistence)
        document = cls(content, path, config, correlation_id)
        document.logger.info(
            "Document loaded",
            extra={"path": str(path), "character_count": len(content)}
        )
        return document

    # Read-only operations

    def get_content(self) -> str:
        """Return the current full document text."""
        return self._content

    @property
    def content(self) -> str:
        return self._content

    def get_structure(self) -> List[ElementRecord]:
        """Return every element of the current content in document order.

        Raises:
            MarkupParseError: If the current content is malformed
        """
        return self._indexer.index(self._content)

    def query(self, pattern: str, limit: Optional[int] = None) -> List[ElementRecord]:
        """Return elements matching ``pattern``, capped at the configured maximum."""
        return self._executor.query(self._content, pattern, limit)

    def get_element(self, exact_path: str) -> Optional[ElementRecord]:
        """Return the first element whose path is exactly ``exact_path``."""
        return self._executor.get_element(self._content, exact_path)

    # Mutating operations

    def apply(self, operation: EditOperation) -> bool:
        """Apply one edit to the first matching element.

        Returns:
            True if an element matched and the content was replaced; False if
            nothing matched, in which case the content is unchanged

        Raises:
            MarkupParseError: If the current content is malformed
        """
        try:
            outcome = run_operation(self._content, operation, self.correlation_id)
        except MarkupParseError as e:
            self.logger.warning(
                "Edit rejected, document is not well-formed",
                extra={
                    "operation": operation.kind.value,
                    "pattern": operation.pattern,
                    "error": e.message,
                    "line": e.position.line if e.position else None,
                }
            )
            raise

        if not outcome.matched:
            self.logger.debug(
                "Edit matched no element",
                extra={"operation": operation.kind.value, "pattern": operation.pattern}
            )
            return False

        # Single swap of the whole buffer
        self._content = outcome.content or ""
        self.modified = True
        record = EditRecord(
            kind=operation.kind.value,
            pattern=operation.pattern,
            summary=operation.describe(),
            correlation_id=self.correlation_id,
        )
        self.history.append(record)
        self.logger.info(
            "Edit applied",
            extra={
                "operation": record.kind,
                "pattern": record.pattern,
                "processing_time_ms": outcome.metrics.processing_time_ms,
            }
        )
        return True

    def update_text(self, pattern: str, value: str) -> bool:
        return self.apply(UpdateText(pattern, value))

    def set_attribute(self, pattern: str, name: str, value: str) -> bool:
        return self.apply(SetAttribute(pattern, name, value))

    def delete_element(self, pattern: str) -> bool:
        return self.apply(DeleteElement(pattern))

    def insert_element(
        self,
        parent_pattern: str,
        name: str,
        attributes: AttributeInput = (),
        text: Optional[str] = None
    ) -> bool:
        """Insert a new last child into the first element matching ``parent_pattern``.

        ``attributes`` may be a mapping or a sequence of pairs; order is kept.
        """
        if isinstance(attributes, Mapping):
            pairs = tuple(attributes.items())
        else:
            pairs = tuple(attributes)
        return self.apply(InsertElement(parent_pattern, name, pairs, text))

    # Persistence

    def commit(self, path: Optional[PathLike] = None) -> Path:
        """Atomically write the current content to ``path`` or the source file.

        Raises:
            ValueError: If no path is given and the document was not loaded
                from a file
            OSError: If writing or renaming fails; the target is untouched
        """
        target = Path(path) if path is not None else self.source_path
        if target is None:
            raise ValueError("No commit path given and document has no source file")
        written = atomic_write(
            self._content, target, self.config.persistence, self.correlation_id
        )
        self.modified = False
        return written


def load_string(
    content: str,
    config: Optional[EditorConfig] = None,
    correlation_id: Optional[str] = None
) -> MarkupDocument:
    """Open an editing session on literal document text."""
    return MarkupDocument.from_string(content, config, correlation_id)


def load_file(
    path: PathLike,
    config: Optional[EditorConfig] = None,
    correlation_id: Optional[str] = None
) -> MarkupDocument:
    """Open an editing session on a document file."""
    return MarkupDocument.from_file(path, config, correlation_id)
