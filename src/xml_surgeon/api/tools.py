"""Function-calling surface for a conversational editing loop.

The loop that decides which element to inspect or edit lives outside this
package. It talks to a document through JSON-schema tool definitions and a
handler that turns each tool call into a short, human-readable answer sized
for a model's context window.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from xml_surgeon.mutation import (
    DeleteElement,
    EditOperation,
    InsertElement,
    SetAttribute,
    UpdateText,
)
from xml_surgeon.shared.logging import get_logger
from xml_surgeon.tokenization import MarkupParseError
from xml_surgeon.tree import ElementRecord

from .document import MarkupDocument

MODIFY_OPERATIONS = ("update_text", "set_attribute", "delete", "insert")
NOT_FOUND_MESSAGE = "No matching element found"


class ToolCallError(Exception):
    """Raised for an unknown tool, unknown operation or missing argument."""


@dataclass
class FunctionDefinition:
    name: str
    description: str
    parameters: Dict[str, Any]


@dataclass
class ToolDefinition:
    """Tool definition in the OpenAI-compatible function-calling format."""

    function: FunctionDefinition
    tool_type: str = "function"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.tool_type,
            "function": {
                "name": self.function.name,
                "description": self.function.description,
                "parameters": self.function.parameters,
            },
        }


@dataclass
class ToolCall:
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: str = "{}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolCall":
        """Build from ``{"id": ..., "function": {"name": ..., "arguments": ...}}``."""
        function = data.get("function") or {}
        if "name" not in function:
            raise ToolCallError("Tool call has no function name")
        return cls(
            id=str(data.get("id", "")),
            name=function["name"],
            arguments=function.get("arguments") or "{}",
        )

    def parsed_arguments(self) -> Dict[str, Any]:
        """Decode the JSON arguments; malformed input counts as no arguments."""
        try:
            value = json.loads(self.arguments)
        except (TypeError, ValueError):
            return {}
        return value if isinstance(value, dict) else {}


@dataclass
class ToolResult:
    tool_call_id: str
    content: str


def _object_schema(
    properties: Dict[str, Any], required: Optional[List[str]] = None
) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required or []}


def _tool(name: str, description: str, parameters: Dict[str, Any]) -> ToolDefinition:
    return ToolDefinition(FunctionDefinition(name, description, parameters))


def get_tool_definitions() -> List[ToolDefinition]:
    """Return the document inspection and modification tools."""
    return [
        _tool(
            "get_xml_structure",
            "Get the hierarchical structure of the XML file.",
            _object_schema({}),
        ),
        _tool(
            "query_xml",
            "Find XML elements matching a path pattern. "
            "Supports: element, parent/child, element[@attr='value']",
            _object_schema(
                {
                    "pattern": {
                        "type": "string",
                        "description": "Path pattern to match "
                                       "(e.g., 'item', 'items/item', 'item[@id=\"1\"]')",
                    }
                },
                ["pattern"],
            ),
        ),
        _tool(
            "get_element",
            "Get a specific XML element by its exact path.",
            _object_schema(
                {
                    "path": {
                        "type": "string",
                        "description": "Exact path to the element (e.g., 'root/items/item')",
                    }
                },
                ["path"],
            ),
        ),
        _tool(
            "modify_xml",
            "Modify the XML file. Operations: update_text, set_attribute, delete, insert",
            _object_schema(
                {
                    "operation": {
                        "type": "string",
                        "enum": list(MODIFY_OPERATIONS),
                        "description": "The modification operation",
                    },
                    "path": {
                        "type": "string",
                        "description": "Path pattern to target element(s)",
                    },
                    "value": {
                        "type": "string",
                        "description": "New text value (for update_text) "
                                       "or attribute value (for set_attribute)",
                    },
                    "attr_name": {
                        "type": "string",
                        "description": "Attribute name (for set_attribute)",
                    },
                    "element_name": {
                        "type": "string",
                        "description": "Name of new element (for insert)",
                    },
                    "attributes": {
                        "type": "object",
                        "description": "Attributes for new element (for insert)",
                    },
                    "text": {
                        "type": "string",
                        "description": "Text content for new element (for insert)",
                    },
                },
                ["operation", "path"],
            ),
        ),
        _tool(
            "finish",
            "Signal that all modifications are complete.",
            _object_schema(
                {
                    "summary": {
                        "type": "string",
                        "description": "Brief summary of modifications made",
                    }
                },
                ["summary"],
            ),
        ),
    ]


def format_structure(
    elements: List[ElementRecord], max_elements: int, preview_length: int
) -> str:
    """Render an indented outline, truncated after ``max_elements`` lines."""
    lines = ["XML Structure:"]
    for element in elements[:max_elements]:
        lines.append("  " * element.depth + element.display(preview_length))
    if len(elements) > max_elements:
        lines.append(f"... and {len(elements) - max_elements} more elements")
    return "\n".join(lines) + "\n"


def _require_string(args: Dict[str, Any], key: str, context: str = "") -> str:
    value = args.get(key)
    if not isinstance(value, str):
        suffix = f" for {context}" if context else " parameter"
        raise ToolCallError(f"Missing {key}{suffix}")
    return value


class ToolHandler:
    """Execute tool calls against one document.

    Keeps the log of successful modifications and whether ``finish`` was
    called, so the surrounding loop knows when to stop and what to report.
    """

    def __init__(
        self, document: MarkupDocument, correlation_id: Optional[str] = None
    ) -> None:
        self.document = document
        self.modifications: List[str] = []
        self.finished = False
        self.logger = get_logger(
            __name__, correlation_id or document.correlation_id, "tool_handler"
        )
        self._handlers: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "get_xml_structure": self._handle_get_structure,
            "query_xml": self._handle_query,
            "get_element": self._handle_get_element,
            "modify_xml": self._handle_modify,
            "finish": self._handle_finish,
        }

    def is_finished(self) -> bool:
        return self.finished

    def execute(self, tool_call: ToolCall) -> ToolResult:
        """Run one tool call.

        Raises:
            ToolCallError: For an unknown tool or invalid arguments
            MarkupParseError: If the document is malformed
        """
        handler = self._handlers.get(tool_call.name)
        if handler is None:
            raise ToolCallError(f"Unknown tool: {tool_call.name}")

        self.logger.debug("Executing tool call", extra={"tool": tool_call.name})
        content = handler(tool_call.parsed_arguments())
        return ToolResult(tool_call_id=tool_call.id, content=content)

    def _handle_get_structure(self, args: Dict[str, Any]) -> str:
        query_config = self.document.config.query
        return format_structure(
            self.document.get_structure(),
            query_config.max_results,
            query_config.preview_length,
        )

    def _handle_query(self, args: Dict[str, Any]) -> str:
        pattern = _require_string(args, "pattern")
        elements = self.document.query(pattern)
        if not elements:
            return f"No elements matching '{pattern}'"

        preview_length = self.document.config.query.preview_length
        lines = [f"Found {len(elements)} element(s) matching '{pattern}':"]
        lines.extend(f"- {element.display(preview_length)}" for element in elements)
        return "\n".join(lines) + "\n"

    def _handle_get_element(self, args: Dict[str, Any]) -> str:
        path = _require_string(args, "path")
        element = self.document.get_element(path)
        if element is None:
            return f"No element at path '{path}'"
        return f"Element: {element.display(self.document.config.query.preview_length)}"

    def _handle_modify(self, args: Dict[str, Any]) -> str:
        operation_name = _require_string(args, "operation")
        path = _require_string(args, "path")

        if operation_name == "update_text":
            value = _require_string(args, "value", "update_text")
            return self._apply(UpdateText(path, value), "Text updated successfully")

        if operation_name == "set_attribute":
            attr_name = _require_string(args, "attr_name", "set_attribute")
            value = _require_string(args, "value", "set_attribute")
            return self._apply(
                SetAttribute(path, attr_name, value), "Attribute set successfully"
            )

        if operation_name == "delete":
            return self._apply(DeleteElement(path), "Element deleted successfully")

        if operation_name == "insert":
            element_name = _require_string(args, "element_name", "insert")
            text = args.get("text")
            raw_attributes = args.get("attributes")
            attributes: List[Tuple[str, str]] = []
            if isinstance(raw_attributes, dict):
                # Non-string values cannot be written verbatim and are skipped
                attributes = [
                    (key, value) for key, value in raw_attributes.items()
                    if isinstance(value, str)
                ]
            return self._apply(
                InsertElement(
                    path, element_name, tuple(attributes),
                    text if isinstance(text, str) else None
                ),
                "Element inserted successfully",
                "No matching parent element found",
            )

        raise ToolCallError(f"Unknown operation: {operation_name}")

    def _handle_finish(self, args: Dict[str, Any]) -> str:
        self.finished = True
        summary = args.get("summary")
        if not isinstance(summary, str):
            summary = "Modifications complete"
        return f"Finished: {summary}\nTotal modifications: {len(self.modifications)}"

    def _apply(
        self,
        operation: EditOperation,
        success_message: str,
        not_found_message: str = NOT_FOUND_MESSAGE
    ) -> str:
        try:
            applied = self.document.apply(operation)
        except MarkupParseError:
            raise
        except ValueError as e:
            # Invalid element or attribute name supplied by the caller
            raise ToolCallError(str(e)) from e

        if not applied:
            return not_found_message
        self.modifications.append(operation.describe())
        return success_message
