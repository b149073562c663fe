"""Edit operations as a closed set of variants.

An operation describes one edit; ``run_operation`` dispatches it to the
matching mutator exactly once per call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from xml_surgeon.shared.result import MutationOutcome

from .attributes import set_attribute
from .delete import delete_element
from .insert import insert_element
from .text import update_text


class EditKind(Enum):
    """The four supported edit kinds."""

    UPDATE_TEXT = "update_text"
    SET_ATTRIBUTE = "set_attribute"
    DELETE = "delete"
    INSERT = "insert"


@dataclass(frozen=True)
class UpdateText:
    pattern: str
    value: str
    kind: EditKind = field(default=EditKind.UPDATE_TEXT, init=False)

    def describe(self) -> str:
        return f"update_text: {self.pattern} = '{self.value}'"


@dataclass(frozen=True)
class SetAttribute:
    pattern: str
    name: str
    value: str
    kind: EditKind = field(default=EditKind.SET_ATTRIBUTE, init=False)

    def describe(self) -> str:
        return f"set_attribute: {self.pattern} @{self.name} = '{self.value}'"


@dataclass(frozen=True)
class DeleteElement:
    pattern: str
    kind: EditKind = field(default=EditKind.DELETE, init=False)

    def describe(self) -> str:
        return f"delete: {self.pattern}"


@dataclass(frozen=True)
class InsertElement:
    """Insert ``name`` as the last child of the first ``pattern`` match."""

    pattern: str
    name: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    text: Optional[str] = None
    kind: EditKind = field(default=EditKind.INSERT, init=False)

    def __post_init__(self) -> None:
        # Accept any sequence of pairs but store an immutable tuple
        object.__setattr__(
            self, "attributes", tuple((str(k), str(v)) for k, v in self.attributes)
        )

    def describe(self) -> str:
        return f"insert: {self.pattern} -> <{self.name}>"


EditOperation = Union[UpdateText, SetAttribute, DeleteElement, InsertElement]


def run_operation(
    content: str,
    operation: EditOperation,
    correlation_id: Optional[str] = None
) -> MutationOutcome:
    """Apply ``operation`` to ``content`` with its dedicated mutator.

    Raises:
        MarkupParseError: If the document is malformed
        ValueError: For invalid element or attribute names
        TypeError: For an object that is not an edit operation
    """
    if isinstance(operation, UpdateText):
        return update_text(content, operation.pattern, operation.value, correlation_id)
    if isinstance(operation, SetAttribute):
        return set_attribute(
            content, operation.pattern, operation.name, operation.value, correlation_id
        )
    if isinstance(operation, DeleteElement):
        return delete_element(content, operation.pattern, correlation_id)
    if isinstance(operation, InsertElement):
        return insert_element(
            content,
            operation.pattern,
            operation.name,
            operation.attributes,
            operation.text,
            correlation_id,
        )
    raise TypeError(f"Unsupported edit operation: {type(operation).__name__}")
