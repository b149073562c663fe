"""Pattern matching and queries for streaming XML editing."""

from .executor import QueryExecutor
from .pattern import (
    Pattern,
    parse_pattern,
    path_matches,
    predicate_matches,
)

__all__ = [
    "Pattern",
    "QueryExecutor",
    "parse_pattern",
    "path_matches",
    "predicate_matches",
]
