"""Tokenization layer for streaming XML editing.

Key Components:
    MarkupTokenizer: Forward-only tokenizer producing byte-exact tokens
    Token: A single token with its raw source text and parsed tag data
    TokenType: Enumeration of supported token types
    TokenPosition: Line/column/offset tracking for error reporting
    MarkupParseError: Raised for malformed markup
"""

from .tokenizer import (
    CDATA_CLOSE,
    Attribute,
    MarkupParseError,
    MarkupTokenizer,
    Token,
    TokenPosition,
    TokenType,
    escape_attribute,
    escape_text,
    is_valid_name,
    iter_tokens,
    unescape,
)

__all__ = [
    "CDATA_CLOSE",
    "Attribute",
    "MarkupParseError",
    "MarkupTokenizer",
    "Token",
    "TokenPosition",
    "TokenType",
    "escape_attribute",
    "escape_text",
    "is_valid_name",
    "iter_tokens",
    "unescape",
]
