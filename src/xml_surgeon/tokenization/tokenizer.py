"""Forward-only XML tokenizer with byte-exact token spans.

This module converts document text into a stream of markup tokens. Every token
keeps the exact slice of source text it was read from, so a consumer that
writes ``token.raw`` for each token reproduces the input unchanged. That
property is what lets the mutators rewrite one region while leaving all other
bytes alone.
"""

import re
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple

from xml_surgeon.shared.logging import get_logger

# Markup delimiters
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
PI_OPEN = "<?"
PI_CLOSE = "?>"
DOCTYPE_OPEN = "<!DOCTYPE"

NAME_PATTERN = r"(?:[^\W\d]|:)[\w.\-:·]*"
NAME_RE = re.compile(NAME_PATTERN)
ATTRIBUTE_RE = re.compile(
    r"\s+(" + NAME_PATTERN + r")\s*=\s*(?:\"([^\"]*)\"|'([^']*)')"
)
ENTITY_RE = re.compile(r"&(#x[0-9a-fA-F]+|#[0-9]+|lt|gt|amp|quot|apos);")

_PREDEFINED_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
}


class TokenType(Enum):
    """Markup token types produced by the tokenizer."""

    START_TAG = auto()               # <name attr="v">
    END_TAG = auto()                 # </name>
    EMPTY_TAG = auto()               # <name attr="v"/>
    TEXT = auto()                    # Character content between tags
    CDATA = auto()                   # <![CDATA[ ... ]]>
    COMMENT = auto()                 # <!-- ... -->
    PROCESSING_INSTRUCTION = auto()  # <?target ... ?>
    DOCTYPE = auto()                 # <!DOCTYPE ...>


@dataclass(frozen=True)
class TokenPosition:
    """Position information for markup tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


class MarkupParseError(ValueError):
    """Raised when document text is not well-formed markup."""

    def __init__(self, message: str, position: Optional[TokenPosition] = None) -> None:
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} at {position}"
        super().__init__(message)


@dataclass(frozen=True)
class Attribute:
    """A single attribute as written in a start or empty tag."""

    name: str
    value: str       # Entity-decoded value
    raw_value: str   # Value exactly as written between the quotes
    quote: str = '"'
    span: Tuple[int, int] = (0, 0)  # name start to closing quote, within Token.raw

    def render(self) -> str:
        """Render the attribute as it appeared in the source."""
        return f"{self.name}={self.quote}{self.raw_value}{self.quote}"


@dataclass(frozen=True)
class Token:
    """A single markup token with its exact source text."""

    type: TokenType
    raw: str
    position: TokenPosition
    name: Optional[str] = None
    attributes: Tuple[Attribute, ...] = ()

    @property
    def is_character_data(self) -> bool:
        return self.type in (TokenType.TEXT, TokenType.CDATA)

    @property
    def text(self) -> str:
        """Decoded character data for TEXT and CDATA tokens, empty otherwise."""
        if self.type == TokenType.TEXT:
            return unescape(self.raw)
        if self.type == TokenType.CDATA:
            return self.raw[len(CDATA_OPEN):-len(CDATA_CLOSE)]
        return ""

    @property
    def is_blank(self) -> bool:
        """True for character data made only of whitespace."""
        return self.is_character_data and not self.text.strip()

    @property
    def attribute_insert_offset(self) -> int:
        """Offset within ``raw`` just past the name or the last attribute."""
        if self.attributes:
            return self.attributes[-1].span[1]
        return 1 + len(self.name or "")

    def attribute_pairs(self) -> List[Tuple[str, str]]:
        """Return the decoded (name, value) pairs in document order."""
        return [(attr.name, attr.value) for attr in self.attributes]


def unescape(text: str) -> str:
    """Decode predefined entities and numeric character references.

    Unknown entity references are left untouched.
    """
    if "&" not in text:
        return text

    def _replace(match: "re.Match[str]") -> str:
        ref = match.group(1)
        try:
            if ref.startswith("#x"):
                return chr(int(ref[2:], 16))
            if ref.startswith("#"):
                return chr(int(ref[1:]))
        except (ValueError, OverflowError):
            # Out-of-range character reference is kept as written
            return match.group(0)
        return _PREDEFINED_ENTITIES[ref]

    return ENTITY_RE.sub(_replace, text)


def escape_text(text: str) -> str:
    """Escape character data for insertion between tags."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\r", "&#13;")
    )


def escape_attribute(value: str) -> str:
    """Escape a value for a double-quoted attribute."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace('"', "&quot;")
        .replace("\n", "&#10;")
        .replace("\t", "&#9;")
        .replace("\r", "&#13;")
    )


def is_valid_name(name: str) -> bool:
    """Check that ``name`` is usable as an element or attribute name."""
    return bool(name) and NAME_RE.fullmatch(name) is not None


class MarkupTokenizer:
    """Single-pass tokenizer over an in-memory document.

    ``tokenize`` is a generator: tokens are produced one at a time and a
    lexical error is raised at the point it is found.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "markup_tokenizer")

    def tokenize(self, content: str) -> Iterator[Token]:
        """Yield the tokens of ``content`` in document order.

        Raises:
            MarkupParseError: On an unterminated construct or malformed tag
        """
        start_time = time.time()
        length = len(content)
        index = 0
        line = 1
        line_start = 0
        token_count = 0

        while index < length:
            position = TokenPosition(line, index - line_start + 1, index)

            if content[index] != "<":
                end = content.find("<", index)
                if end == -1:
                    end = length
                token = Token(TokenType.TEXT, content[index:end], position)
            elif content.startswith(COMMENT_OPEN, index):
                token = self._read_delimited(
                    content, index, COMMENT_OPEN, COMMENT_CLOSE,
                    TokenType.COMMENT, position, "comment"
                )
            elif content.startswith(CDATA_OPEN, index):
                token = self._read_delimited(
                    content, index, CDATA_OPEN, CDATA_CLOSE,
                    TokenType.CDATA, position, "CDATA section"
                )
            elif content.startswith(PI_OPEN, index):
                token = self._read_delimited(
                    content, index, PI_OPEN, PI_CLOSE,
                    TokenType.PROCESSING_INSTRUCTION, position, "processing instruction"
                )
            elif content.startswith(DOCTYPE_OPEN, index):
                token = self._read_doctype(content, index, position)
            elif content.startswith("<!", index):
                raise MarkupParseError("Unsupported markup declaration", position)
            else:
                token = self._read_tag(content, index, position)

            yield token
            token_count += 1

            index += len(token.raw)
            newlines = token.raw.count("\n")
            if newlines:
                line += newlines
                line_start = position.offset + token.raw.rfind("\n") + 1

        self.logger.debug(
            "Tokenization completed",
            extra={
                "token_count": token_count,
                "character_count": length,
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )

    def _read_delimited(
        self,
        content: str,
        index: int,
        opener: str,
        closer: str,
        token_type: TokenType,
        position: TokenPosition,
        description: str
    ) -> Token:
        end = content.find(closer, index + len(opener))
        if end == -1:
            raise MarkupParseError(f"Unterminated {description}", position)
        return Token(token_type, content[index:end + len(closer)], position)

    def _read_doctype(self, content: str, index: int, position: TokenPosition) -> Token:
        # Internal subsets may contain '>' inside brackets and quoted literals
        bracket_depth = 0
        quote: Optional[str] = None
        cursor = index + len(DOCTYPE_OPEN)
        while cursor < len(content):
            char = content[cursor]
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == "[":
                bracket_depth += 1
            elif char == "]":
                bracket_depth -= 1
            elif char == ">" and bracket_depth <= 0:
                return Token(TokenType.DOCTYPE, content[index:cursor + 1], position)
            cursor += 1
        raise MarkupParseError("Unterminated DOCTYPE declaration", position)

    def _read_tag(self, content: str, index: int, position: TokenPosition) -> Token:
        quote: Optional[str] = None
        cursor = index + 1
        while cursor < len(content):
            char = content[cursor]
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == ">":
                break
            elif char == "<":
                raise MarkupParseError("Unexpected '<' inside tag", position)
            cursor += 1
        else:
            raise MarkupParseError("Unterminated tag", position)

        raw = content[index:cursor + 1]
        if raw.startswith("</"):
            name = raw[2:-1].rstrip()
            if not is_valid_name(name):
                raise MarkupParseError(f"Malformed end tag {raw!r}", position)
            return Token(TokenType.END_TAG, raw, position, name=name)

        self_closing = raw.endswith("/>")
        body = raw[1:-2] if self_closing else raw[1:-1]
        name_match = NAME_RE.match(body)
        if name_match is None:
            raise MarkupParseError(f"Invalid tag name in {raw!r}", position)

        attributes = self._parse_attributes(body, name_match.end(), position)
        token_type = TokenType.EMPTY_TAG if self_closing else TokenType.START_TAG
        return Token(
            token_type, raw, position,
            name=name_match.group(0),
            attributes=tuple(attributes),
        )

    def _parse_attributes(
        self, body: str, cursor: int, position: TokenPosition
    ) -> List[Attribute]:
        attributes: List[Attribute] = []
        while cursor < len(body):
            if not body[cursor:].strip():
                break
            match = ATTRIBUTE_RE.match(body, cursor)
            if match is None:
                raise MarkupParseError(
                    f"Malformed attribute near {body[cursor:].strip()[:20]!r}",
                    position
                )
            name, double_quoted, single_quoted = match.groups()
            if double_quoted is not None:
                raw_value, quote = double_quoted, '"'
            else:
                raw_value, quote = single_quoted, "'"
            # Body starts one character into the raw tag, after '<'
            span = (match.start(1) + 1, match.end() + 1)
            attributes.append(
                Attribute(name, unescape(raw_value), raw_value, quote, span)
            )
            cursor = match.end()
        return attributes


def iter_tokens(content: str, correlation_id: Optional[str] = None) -> Iterator[Token]:
    """Tokenize ``content`` with a fresh tokenizer."""
    return MarkupTokenizer(correlation_id).tokenize(content)
