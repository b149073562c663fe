"""Public API for streaming XML editing."""

from .document import MarkupDocument, load_file, load_string
from .tools import (
    ToolCall,
    ToolCallError,
    ToolDefinition,
    ToolHandler,
    ToolResult,
    format_structure,
    get_tool_definitions,
)

__all__ = [
    "MarkupDocument",
    "ToolCall",
    "ToolCallError",
    "ToolDefinition",
    "ToolHandler",
    "ToolResult",
    "format_structure",
    "get_tool_definitions",
    "load_file",
    "load_string",
]
