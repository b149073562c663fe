"""Path and attribute pattern matching.

Patterns select elements by a slash-joined path suffix and an optional
attribute predicate::

    item
    root/items/item
    item[@id='42']

Matching is exact and aligned on whole path segments: ``tem`` never matches
an element named ``item``.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from xml_surgeon.tree.indexer import PATH_SEPARATOR, ElementRecord

PREDICATE_OPEN = "[@"
PREDICATE_CLOSE = "]"
QUOTE_CHARS = ("'", '"')

Predicate = Tuple[str, str]


@dataclass(frozen=True)
class Pattern:
    """A parsed element pattern."""

    path_suffix: str
    predicate: Optional[Predicate] = None

    def matches(
        self, path: str, name: str, attributes: Sequence[Tuple[str, str]]
    ) -> bool:
        """Check an element given its path, name and attributes."""
        return (
            path_matches(path, name, self.path_suffix)
            and predicate_matches(attributes, self.predicate)
        )

    def matches_record(self, record: ElementRecord) -> bool:
        return self.matches(record.path, record.name, record.attributes)

    def __str__(self) -> str:
        if self.predicate is None:
            return self.path_suffix
        name, value = self.predicate
        return f"{self.path_suffix}[@{name}='{value}']"


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTE_CHARS:
        return value[1:-1]
    return value


def parse_pattern(pattern: str) -> Pattern:
    """Split a pattern string into path suffix and attribute predicate.

    A predicate is recognized only when ``[@`` is followed later by ``]`` and
    the bracket body contains ``=``; otherwise the whole string is the path
    suffix.

    Examples:
        >>> parse_pattern("item[@id='123']")
        Pattern(path_suffix='item', predicate=('id', '123'))
        >>> parse_pattern("root/items/item")
        Pattern(path_suffix='root/items/item', predicate=None)
    """
    open_index = pattern.find(PREDICATE_OPEN)
    if open_index != -1:
        close_index = pattern.rfind(PREDICATE_CLOSE)
        if close_index > open_index:
            body = pattern[open_index + len(PREDICATE_OPEN):close_index]
            if "=" in body:
                attr_name, raw_value = body.split("=", 1)
                return Pattern(
                    path_suffix=pattern[:open_index],
                    predicate=(attr_name.strip(), _strip_quotes(raw_value.strip())),
                )
    return Pattern(path_suffix=pattern)


def path_matches(element_path: str, element_name: str, path_suffix: str) -> bool:
    """Check whether an element path ends with the given segments.

    A suffix without separators also matches by element name, so a bare tag
    name finds the element anywhere in the tree.
    """
    if not path_suffix:
        return False
    if element_path == path_suffix:
        return True
    if element_path.endswith(PATH_SEPARATOR + path_suffix):
        return True
    return PATH_SEPARATOR not in path_suffix and element_name == path_suffix


def predicate_matches(
    attributes: Sequence[Tuple[str, str]], predicate: Optional[Predicate]
) -> bool:
    """Check an attribute predicate with exact, case-sensitive equality."""
    if predicate is None:
        return True
    return any(pair == predicate for pair in attributes)
