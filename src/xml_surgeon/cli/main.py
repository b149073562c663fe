"""Main CLI entry point for the xml-surgeon command-line tool.

Provides inspection (structure, query, get) and single-match editing
(update-text, set-attr, delete, insert) of one XML file per invocation.
Edits are committed atomically unless ``--dry-run`` is given.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from xml_surgeon.api import MarkupDocument, format_structure
from xml_surgeon.mutation import (
    DeleteElement,
    EditOperation,
    InsertElement,
    SetAttribute,
    UpdateText,
)
from xml_surgeon.shared.config import ConfigError, EditorConfig
from xml_surgeon.shared.logging import configure_logging, get_logger
from xml_surgeon.tokenization import MarkupParseError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

SUCCESS_MESSAGES = {
    "update_text": "Text updated successfully",
    "set_attribute": "Attribute set successfully",
    "delete": "Element deleted successfully",
    "insert": "Element inserted successfully",
}

logger = get_logger(__name__, None, "cli")


def load_config(config_path: Optional[Path]) -> EditorConfig:
    """Load an editor configuration from a JSON file, or the defaults.

    Raises:
        ConfigError: If the file is invalid
        OSError: If the file cannot be read
    """
    if config_path is None:
        return EditorConfig()
    return EditorConfig.from_json(config_path.read_text(encoding="utf-8"))


def parse_attribute(value: str) -> Tuple[str, str]:
    """Parse a ``name=value`` command-line attribute."""
    name, sep, attr_value = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"attribute must be name=value, got {value!r}")
    return name, attr_value


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-surgeon",
        description="Inspect and surgically edit XML files one element at a time",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    structure_parser = subparsers.add_parser(
        "structure", help="Show the element outline of a file"
    )
    structure_parser.add_argument("file", type=Path, help="XML file")

    query_parser = subparsers.add_parser("query", help="Find elements by pattern")
    query_parser.add_argument("file", type=Path, help="XML file")
    query_parser.add_argument("pattern", help="Pattern, e.g. item[@id='2']")
    query_parser.add_argument(
        "--limit", "-n",
        type=int,
        help="Maximum results (default: configured max_results)"
    )

    get_parser = subparsers.add_parser("get", help="Get an element by exact path")
    get_parser.add_argument("file", type=Path, help="XML file")
    get_parser.add_argument("path", help="Exact element path, e.g. root/items/item")

    update_parser = subparsers.add_parser(
        "update-text", help="Replace the text of the first matching element"
    )
    update_parser.add_argument("file", type=Path, help="XML file")
    update_parser.add_argument("pattern", help="Element pattern")
    update_parser.add_argument("value", help="New text")

    attr_parser = subparsers.add_parser(
        "set-attr", help="Set an attribute on the first matching element"
    )
    attr_parser.add_argument("file", type=Path, help="XML file")
    attr_parser.add_argument("pattern", help="Element pattern")
    attr_parser.add_argument("name", help="Attribute name")
    attr_parser.add_argument("value", help="Attribute value")

    delete_parser = subparsers.add_parser(
        "delete", help="Delete the first matching element"
    )
    delete_parser.add_argument("file", type=Path, help="XML file")
    delete_parser.add_argument("pattern", help="Element pattern")

    insert_parser = subparsers.add_parser(
        "insert", help="Insert a child into the first matching parent"
    )
    insert_parser.add_argument("file", type=Path, help="XML file")
    insert_parser.add_argument("parent", help="Parent element pattern")
    insert_parser.add_argument("name", help="New element name")
    insert_parser.add_argument(
        "--attr", "-a",
        action="append",
        type=parse_attribute,
        default=[],
        metavar="NAME=VALUE",
        help="Attribute for the new element (repeatable, order kept)"
    )
    insert_parser.add_argument("--text", "-t", help="Text content for the new element")

    for edit_parser in (update_parser, attr_parser, delete_parser, insert_parser):
        edit_parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Print the edited document instead of writing it"
        )
        edit_parser.add_argument(
            "--output", "-o",
            type=Path,
            help="Write the result here instead of over the input file"
        )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def build_operation(args: argparse.Namespace) -> EditOperation:
    """Translate an edit command into an edit operation."""
    if args.command == "update-text":
        return UpdateText(args.pattern, args.value)
    if args.command == "set-attr":
        return SetAttribute(args.pattern, args.name, args.value)
    if args.command == "delete":
        return DeleteElement(args.pattern)
    if args.command == "insert":
        return InsertElement(args.parent, args.name, tuple(args.attr), args.text)
    raise ValueError(f"Not an edit command: {args.command}")


def _emit(data: Any, format_type: str, text: str) -> None:
    if format_type == "json":
        print(json.dumps(data, indent=2))
    else:
        print(text, end="" if text.endswith("\n") else "\n")


def cmd_structure(document: MarkupDocument, args: argparse.Namespace) -> int:
    """Handle structure command."""
    elements = document.get_structure()
    query_config = document.config.query
    _emit(
        [element.to_dict() for element in elements],
        args.format,
        format_structure(elements, query_config.max_results, query_config.preview_length),
    )
    return EXIT_OK


def cmd_query(document: MarkupDocument, args: argparse.Namespace) -> int:
    """Handle query command."""
    elements = document.query(args.pattern, args.limit)
    preview_length = document.config.query.preview_length
    if elements:
        lines = [f"Found {len(elements)} element(s) matching '{args.pattern}':"]
        lines.extend(f"- {element.display(preview_length)}" for element in elements)
        text = "\n".join(lines)
    else:
        text = f"No elements matching '{args.pattern}'"
    _emit([element.to_dict() for element in elements], args.format, text)
    return EXIT_OK if elements else EXIT_FAILURE


def cmd_get(document: MarkupDocument, args: argparse.Namespace) -> int:
    """Handle get command."""
    element = document.get_element(args.path)
    if element is None:
        _emit(None, args.format, f"No element at path '{args.path}'")
        return EXIT_FAILURE
    preview_length = document.config.query.preview_length
    _emit(element.to_dict(), args.format, f"Element: {element.display(preview_length)}")
    return EXIT_OK


def cmd_edit(document: MarkupDocument, args: argparse.Namespace) -> int:
    """Handle the four edit commands."""
    operation = build_operation(args)
    matched = document.apply(operation)

    result: Dict[str, Any] = {
        "file": str(args.file),
        "operation": operation.kind.value,
        "pattern": operation.pattern,
        "matched": matched,
        "written": None,
    }

    if not matched:
        not_found = (
            "No matching parent element found"
            if operation.kind.value == "insert" else "No matching element found"
        )
        _emit(result, args.format, not_found)
        return EXIT_FAILURE

    if args.dry_run:
        if args.format == "json":
            result["content"] = document.get_content()
            _emit(result, args.format, "")
        else:
            sys.stdout.write(document.get_content())
        return EXIT_OK

    written = document.commit(args.output)
    result["written"] = str(written)
    _emit(result, args.format, f"{SUCCESS_MESSAGES[operation.kind.value]}: {written}")
    return EXIT_OK


COMMANDS = {
    "structure": cmd_structure,
    "query": cmd_query,
    "get": cmd_get,
    "update-text": cmd_edit,
    "set-attr": cmd_edit,
    "delete": cmd_edit,
    "insert": cmd_edit,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    try:
        config = load_config(args.config)
    except (ConfigError, OSError) as e:
        print(f"Error: could not load configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    try:
        document = MarkupDocument.from_file(args.file, config)
        return COMMANDS[args.command](document, args)
    except MarkupParseError as e:
        print(f"Error: {args.file} is not well-formed: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug("Command failed", extra={"command": args.command, "error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
