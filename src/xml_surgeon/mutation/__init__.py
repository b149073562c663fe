"""Single-pass mutators for streaming XML editing.

Key Components:
    TextUpdater, AttributeSetter, ElementDeleter, ElementInserter: the four
        independent one-pass rewrites
    EditKind and the operation dataclasses: closed description of an edit
    run_operation: dispatch an operation to its mutator
"""

from .attributes import AttributeSetter, set_attribute
from .base import Mutator, render_element
from .delete import ElementDeleter, delete_element
from .insert import ElementInserter, insert_element
from .operations import (
    DeleteElement,
    EditKind,
    EditOperation,
    InsertElement,
    SetAttribute,
    UpdateText,
    run_operation,
)
from .text import TextUpdater, update_text

__all__ = [
    "AttributeSetter",
    "DeleteElement",
    "EditKind",
    "EditOperation",
    "ElementDeleter",
    "ElementInserter",
    "InsertElement",
    "Mutator",
    "SetAttribute",
    "TextUpdater",
    "UpdateText",
    "delete_element",
    "insert_element",
    "render_element",
    "run_operation",
    "set_attribute",
    "update_text",
]
