#!/usr/bin/env python3
"""
XML Surgeon Quick Start Guide

Walks through the three API levels: simple functions, the editing session
and the tool surface used by a conversational editing loop.
"""

import json
import sys
import tempfile
from pathlib import Path

# Add src to path for running examples directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import xml_surgeon as xs
from xml_surgeon.api import ToolCall, ToolHandler, get_tool_definitions

CATALOG = """<?xml version="1.0" encoding="UTF-8"?>
<!-- Seasonal catalog, hand maintained -->
<catalog>
  <items>
    <item id="1" sku="TEA-01">Green tea</item>
    <item id="2" sku="TEA-02">Black tea</item>
    <item id="3" sku="CUP-01"/>
  </items>
</catalog>
"""


def level_1_simple_functions():
    """Level 1: inspect a document without keeping a session."""
    print("=== Level 1: Simple Functions ===")

    for element in xs.get_structure(CATALOG):
        print("  " * element.depth + element.display())

    print(xs.parse_pattern("item[@id='2']"))
    print()


def level_2_editing_session():
    """Level 2: query, edit and commit one document."""
    print("=== Level 2: Editing Session ===")

    with tempfile.TemporaryDirectory() as directory:
        path = Path(directory) / "catalog.xml"
        path.write_text(CATALOG, encoding="utf-8")

        doc = xs.load_file(path)
        black_tea = doc.query("item[@id='2']")[0]
        print(f"Black tea: {black_tea.text}")

        doc.update_text("item[@id='2']", "Earl Grey")
        doc.set_attribute("item[@id='3']", "stock", "0")
        doc.insert_element("items", "item", {"id": "4", "sku": "POT-01"}, "Teapot")
        doc.delete_element("item[@id='1']")
        print(f"Edits applied: {[str(record) for record in doc.history]}")

        doc.commit()
        print(path.read_text(encoding="utf-8"))


def level_3_tool_surface():
    """Level 3: drive edits through tool calls, as a model would."""
    print("=== Level 3: Tool Surface ===")

    print(f"Tools: {[tool.function.name for tool in get_tool_definitions()]}")
    handler = ToolHandler(xs.load_string(CATALOG))

    calls = [
        ("query_xml", {"pattern": "item"}),
        ("modify_xml", {"operation": "set_attribute", "path": "catalog",
                        "attr_name": "season", "value": "winter"}),
        ("finish", {"summary": "Tagged the catalog season"}),
    ]
    for index, (name, arguments) in enumerate(calls):
        result = handler.execute(
            ToolCall(id=f"call-{index}", name=name, arguments=json.dumps(arguments))
        )
        print(f"{name} -> {result.content}")

    print(f"Finished: {handler.is_finished()}")


if __name__ == "__main__":
    level_1_simple_functions()
    level_2_editing_session()
    level_3_tool_surface()
