"""File loading and atomic commit for streaming XML editing."""

from .commit import atomic_write, read_document

__all__ = [
    "atomic_write",
    "read_document",
]
