"""Tests for inserting child elements."""

import pytest

from xml_surgeon.mutation import ElementInserter, insert_element, render_element
from xml_surgeon.tokenization import MarkupParseError
from xml_surgeon.tree import get_structure


class TestRenderElement:
    """Test serialization of new elements."""

    def test_self_closing_without_text(self):
        assert render_element("item") == "<item/>"

    def test_attributes_and_text(self):
        rendered = render_element("item", [("id", "1"), ("k", 'a"b')], "x & y")

        assert rendered == '<item id="1" k="a&quot;b">x &amp; y</item>'

    def test_empty_text_is_not_self_closing(self):
        assert render_element("item", text="") == "<item></item>"


class TestInsertElement:
    """Test appending a child to the first matching parent."""

    def test_insert_into_empty_parent(self):
        outcome = insert_element(
            "<root><items></items></root>", "items", "item", [("id", "1")], "x"
        )

        assert outcome.matched
        assert outcome.content == '<root><items><item id="1">x</item></items></root>'

    def test_inserted_as_last_child(self):
        content = "<r><list><a/><b>t</b>\n</list></r>"

        outcome = insert_element(content, "list", "c")

        assert outcome.content == "<r><list><a/><b>t</b>\n<c/></list></r>"

    def test_self_closing_parent_expanded(self):
        outcome = insert_element('<r><list id="7" /></r>', "list", "c", text="v")

        assert outcome.content == '<r><list id="7" ><c>v</c></list></r>'

    def test_attribute_order_preserved(self):
        attributes = [("z", "1"), ("a", "2"), ("m", "3")]

        outcome = insert_element("<r/>", "r", "c", attributes)

        assert outcome.content == '<r><c z="1" a="2" m="3"/></r>'
        assert get_structure(outcome.content)[1].attributes == attributes

    def test_only_first_parent(self):
        outcome = insert_element("<r><p/><p/></r>", "p", "c")

        assert outcome.content == "<r><p><c/></p><p/></r>"

    def test_nested_same_name_parent_targets_outer(self):
        outcome = insert_element("<r><p><p></p></p></r>", "p", "c")

        assert outcome.content == "<r><p><p></p><c/></p></r>"

    def test_predicate_parent(self):
        content = '<r><p id="1"></p><p id="2"></p></r>'

        outcome = insert_element(content, "p[@id='2']", "c")

        assert outcome.content == '<r><p id="1"></p><p id="2"><c/></p></r>'

    def test_no_parent_match(self):
        outcome = insert_element("<r/>", "missing", "c")

        assert not outcome.matched
        assert outcome.content is None

    def test_depth_of_inserted_child(self):
        outcome = insert_element("<r><items></items></r>", "items", "item")

        assert get_structure(outcome.content)[-1].depth == 2

    @pytest.mark.parametrize("name, attributes, message", [
        ("bad name", (), "Invalid element name"),
        ("", (), "Invalid element name"),
        ("ok", [("1x", "v")], "Invalid attribute name"),
    ])
    def test_invalid_names(self, name, attributes, message):
        with pytest.raises(ValueError, match=message):
            ElementInserter("r", name, attributes)

    def test_malformed_document(self):
        with pytest.raises(MarkupParseError):
            insert_element("<r><p></r>", "p", "c")
