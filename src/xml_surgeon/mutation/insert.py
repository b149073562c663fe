"""Insert a new child into the first matching parent element."""

from typing import List, Optional, Sequence, Tuple

from xml_surgeon.shared.result import MutationOutcome
from xml_surgeon.tokenization import TokenType
from xml_surgeon.tree.indexer import TagStack

from .base import Mutator, end_tag, expand_empty_tag, render_element, validate_name


class ElementInserter(Mutator):
    """Append a child element as the last child of the first matching parent.

    A self-closing parent is expanded into an open tag, the new child and a
    close tag; the parent's own attributes are carried over untouched.
    """

    component = "element_inserter"

    def __init__(
        self,
        parent_pattern: str,
        element_name: str,
        attributes: Sequence[Tuple[str, str]] = (),
        text: Optional[str] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        validate_name(element_name, "element")
        for attr_name, _ in attributes:
            validate_name(attr_name, "attribute")
        super().__init__(parent_pattern, correlation_id)
        self.element_name = element_name
        self.attributes = list(attributes)
        self.text = text
        self.rendered_child = render_element(element_name, self.attributes, text)

    def _transform(self, content: str) -> Tuple[List[str], bool]:
        output: List[str] = []
        stack = TagStack()
        matched = False
        parent_depth: Optional[int] = None

        for token in self._tokens(content):
            searching = not matched and parent_depth is None

            if token.type == TokenType.START_TAG:
                if searching and self._is_match(token, stack.path_for(token.name or "")):
                    parent_depth = stack.depth
                stack.push(token)
                output.append(token.raw)

            elif token.type == TokenType.EMPTY_TAG:
                if searching and self._is_match(token, stack.path_for(token.name or "")):
                    output.append(expand_empty_tag(token))
                    output.append(self.rendered_child)
                    output.append(end_tag(token.name or ""))
                    matched = True
                else:
                    output.append(token.raw)

            elif token.type == TokenType.END_TAG:
                if parent_depth is not None and len(stack) == parent_depth + 1:
                    output.append(self.rendered_child)
                    matched = True
                    parent_depth = None
                stack.pop(token)
                output.append(token.raw)

            else:
                output.append(token.raw)

        stack.finish()
        return output, matched


def insert_element(
    content: str,
    parent_pattern: str,
    element_name: str,
    attributes: Sequence[Tuple[str, str]] = (),
    text: Optional[str] = None,
    correlation_id: Optional[str] = None
) -> MutationOutcome:
    """Insert a new child element into the first parent matching the pattern."""
    return ElementInserter(
        parent_pattern, element_name, attributes, text, correlation_id
    ).run(content)
