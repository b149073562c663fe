"""XML Surgeon.

A streaming query-and-edit engine for XML documents. Structure is re-derived
from a single forward pass on every call, and each edit rewrites exactly one
element while every other byte of the document stays as it was.

Progressive API Disclosure:
- Level 1: Simple functions - load_string(), load_file(), get_structure()
- Level 2: Editing session - MarkupDocument class
- Level 3: Agent tool surface - ToolHandler and get_tool_definitions()
"""

__version__ = "0.1.0"
__author__ = "XML Surgeon Team"

from .api import (
    MarkupDocument,
    ToolCall,
    ToolCallError,
    ToolHandler,
    get_tool_definitions,
    load_file,
    load_string,
)
from .query import Pattern, parse_pattern
from .shared.config import EditorConfig
from .tokenization import MarkupParseError
from .tree import ElementRecord, get_structure

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "load_string",
    "load_file",
    "get_structure",
    "parse_pattern",

    # Level 2: Editing session
    "MarkupDocument",

    # Level 3: Agent tool surface
    "ToolCall",
    "ToolCallError",
    "ToolHandler",
    "get_tool_definitions",

    # Result objects, patterns and configuration
    "ElementRecord",
    "Pattern",
    "EditorConfig",

    # Errors
    "MarkupParseError",
]
