"""Delete the first matching element and its subtree."""

from typing import List, Optional, Tuple

from xml_surgeon.shared.result import MutationOutcome
from xml_surgeon.tokenization import TokenType
from xml_surgeon.tree.indexer import TagStack

from .base import Mutator


class ElementDeleter(Mutator):
    """Suppress every token of the first matching element.

    Tokens inside the deleted subtree are still pushed and popped on the tag
    stack, so a malformed subtree fails the call like anywhere else.
    """

    component = "element_deleter"

    def _transform(self, content: str) -> Tuple[List[str], bool]:
        output: List[str] = []
        stack = TagStack()
        matched = False
        # Stack depth at which the deleted element was opened
        skip_depth: Optional[int] = None

        for token in self._tokens(content):
            if skip_depth is not None:
                if token.type == TokenType.START_TAG:
                    stack.push(token)
                elif token.type == TokenType.END_TAG:
                    stack.pop(token)
                    if len(stack) == skip_depth:
                        skip_depth = None
                continue

            if token.type in (TokenType.START_TAG, TokenType.EMPTY_TAG):
                is_target = not matched and self._is_match(
                    token, stack.path_for(token.name or "")
                )
                if token.type == TokenType.START_TAG:
                    if is_target:
                        skip_depth = stack.depth
                        matched = True
                    stack.push(token)
                elif is_target:
                    matched = True
                if is_target:
                    continue
            elif token.type == TokenType.END_TAG:
                stack.pop(token)

            output.append(token.raw)

        stack.finish()
        return output, matched


def delete_element(
    content: str, pattern: str, correlation_id: Optional[str] = None
) -> MutationOutcome:
    """Delete the first element matching ``pattern``."""
    return ElementDeleter(pattern, correlation_id).run(content)
