"""Set an attribute on the first matching element."""

from typing import List, Optional, Tuple

from xml_surgeon.shared.result import MutationOutcome
from xml_surgeon.tokenization import Token, TokenType, escape_attribute
from xml_surgeon.tree.indexer import TagStack

from .base import Mutator, validate_name


class AttributeSetter(Mutator):
    """Replace or append one attribute on the first matching tag.

    The tag is spliced rather than re-serialized: an existing attribute is
    replaced where it stands and a new one is appended after the last
    attribute, so whitespace, quoting and the order of every other attribute
    are preserved.
    """

    component = "attribute_setter"

    def __init__(
        self,
        pattern: str,
        attr_name: str,
        attr_value: str,
        correlation_id: Optional[str] = None
    ) -> None:
        validate_name(attr_name, "attribute")
        super().__init__(pattern, correlation_id)
        self.attr_name = attr_name
        self.attr_value = attr_value

    def rewrite_tag(self, token: Token) -> str:
        """Return ``token.raw`` with the attribute set."""
        rendered = f'{self.attr_name}="{escape_attribute(self.attr_value)}"'
        for attribute in token.attributes:
            if attribute.name == self.attr_name:
                start, end = attribute.span
                return token.raw[:start] + rendered + token.raw[end:]

        offset = token.attribute_insert_offset
        return token.raw[:offset] + " " + rendered + token.raw[offset:]

    def _transform(self, content: str) -> Tuple[List[str], bool]:
        output: List[str] = []
        stack = TagStack()
        matched = False

        for token in self._tokens(content):
            if token.type in (TokenType.START_TAG, TokenType.EMPTY_TAG):
                if not matched and self._is_match(token, stack.path_for(token.name or "")):
                    output.append(self.rewrite_tag(token))
                    matched = True
                else:
                    output.append(token.raw)
                if token.type == TokenType.START_TAG:
                    stack.push(token)
                continue

            if token.type == TokenType.END_TAG:
                stack.pop(token)
            output.append(token.raw)

        stack.finish()
        return output, matched


def set_attribute(
    content: str,
    pattern: str,
    attr_name: str,
    attr_value: str,
    correlation_id: Optional[str] = None
) -> MutationOutcome:
    """Set ``attr_name`` on the first element matching ``pattern``."""
    return AttributeSetter(pattern, attr_name, attr_value, correlation_id).run(content)
