"""Replace the text of the first matching element."""

from typing import List, Optional, Tuple

from xml_surgeon.shared.result import MutationOutcome
from xml_surgeon.tokenization import CDATA_CLOSE, Token, TokenType, escape_text
from xml_surgeon.tree.indexer import TagStack

from .base import Mutator, end_tag, expand_empty_tag


class TextUpdater(Mutator):
    """Rewrite the leading character data of the first matching element.

    The first non-blank TEXT or CDATA token directly inside the target is
    replaced. A target with no such token gets the new text written just
    before its closing tag; a self-closing target is expanded to hold it.
    """

    component = "text_updater"

    def __init__(
        self, pattern: str, new_text: str, correlation_id: Optional[str] = None
    ) -> None:
        super().__init__(pattern, correlation_id)
        self.new_text = new_text

    def _replacement_for(self, token: Token) -> str:
        if token.type == TokenType.CDATA and CDATA_CLOSE not in self.new_text:
            return f"<![CDATA[{self.new_text}]]>"
        return escape_text(self.new_text)

    def _transform(self, content: str) -> Tuple[List[str], bool]:
        output: List[str] = []
        stack = TagStack()
        matched = False
        # Depth of the target element while we are inside it
        target_depth: Optional[int] = None

        for token in self._tokens(content):
            searching = not matched and target_depth is None

            if token.type == TokenType.START_TAG:
                if searching and self._is_match(token, stack.path_for(token.name or "")):
                    target_depth = stack.depth
                stack.push(token)
                output.append(token.raw)

            elif token.type == TokenType.EMPTY_TAG:
                if searching and self._is_match(token, stack.path_for(token.name or "")):
                    output.append(expand_empty_tag(token))
                    output.append(escape_text(self.new_text))
                    output.append(end_tag(token.name or ""))
                    matched = True
                else:
                    output.append(token.raw)

            elif token.type == TokenType.END_TAG:
                if target_depth is not None and len(stack) == target_depth + 1:
                    # Target closes without text of its own
                    output.append(escape_text(self.new_text))
                    matched = True
                    target_depth = None
                stack.pop(token)
                output.append(token.raw)

            elif (
                token.is_character_data
                and target_depth is not None
                and len(stack) == target_depth + 1
                and not token.is_blank
            ):
                output.append(self._replacement_for(token))
                matched = True
                target_depth = None

            else:
                output.append(token.raw)

        stack.finish()
        return output, matched


def update_text(
    content: str,
    pattern: str,
    new_text: str,
    correlation_id: Optional[str] = None
) -> MutationOutcome:
    """Replace the text of the first element matching ``pattern``."""
    return TextUpdater(pattern, new_text, correlation_id).run(content)
