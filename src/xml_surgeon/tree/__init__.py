"""Structural indexing for streaming XML editing.

Key Components:
    StructuralIndexer: One-pass producer of element records
    ElementRecord: Path, name, attributes, leading text and depth of an element
    TagStack: Open-element stack with balance checking
"""

from .indexer import (
    PATH_SEPARATOR,
    ElementRecord,
    StructuralIndexer,
    TagStack,
    get_structure,
)

__all__ = [
    "PATH_SEPARATOR",
    "ElementRecord",
    "StructuralIndexer",
    "TagStack",
    "get_structure",
]
