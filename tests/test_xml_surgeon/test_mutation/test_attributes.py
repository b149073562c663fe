"""Tests for setting attributes in place."""

import pytest

from xml_surgeon.mutation import AttributeSetter, set_attribute
from xml_surgeon.tokenization import MarkupParseError
from xml_surgeon.tree import get_structure


class TestSetAttribute:
    """Test attribute replacement and insertion."""

    def test_replace_existing_keeps_position(self):
        content = '<r><item a="1" id="2" z="3">x</item></r>'

        outcome = set_attribute(content, "item", "id", "9")

        assert outcome.content == '<r><item a="1" id="9" z="3">x</item></r>'

    def test_replace_single_quoted_and_spaced_attribute(self):
        content = "<r><item  id = '2'\n  z='3'>x</item></r>"

        outcome = set_attribute(content, "item", "id", "9")

        assert outcome.content == "<r><item  id=\"9\"\n  z='3'>x</item></r>"

    def test_append_new_attribute(self):
        content = '<r><item a="1">x</item></r>'

        outcome = set_attribute(content, "item", "status", "done")

        assert outcome.content == '<r><item a="1" status="done">x</item></r>'

    def test_append_to_tag_without_attributes(self):
        outcome = set_attribute("<r><item >x</item></r>", "item", "k", "v")

        assert outcome.content == '<r><item k="v" >x</item></r>'

    def test_self_closing_form_preserved(self):
        outcome = set_attribute('<r><item a="1" /></r>', "item", "b", "2")

        assert outcome.content == '<r><item a="1" b="2" /></r>'

    def test_root_element(self):
        outcome = set_attribute("<r><c/></r>", "r", "version", "2")

        assert outcome.content == '<r version="2"><c/></r>'

    def test_value_is_escaped(self):
        outcome = set_attribute("<r/>", "r", "q", 'say "hi" & <go>')

        assert outcome.content == '<r q="say &quot;hi&quot; &amp; &lt;go>"/>'
        assert get_structure(outcome.content)[0].attributes == [("q", 'say "hi" & <go>')]

    def test_predicate_selects_target(self):
        content = '<r><i id="1"/><i id="2"/></r>'

        outcome = set_attribute(content, "i[@id='2']", "on", "yes")

        assert outcome.content == '<r><i id="1"/><i id="2" on="yes"/></r>'

    def test_only_first_match(self):
        outcome = set_attribute("<r><i/><i/></r>", "i", "n", "1")

        assert outcome.content == '<r><i n="1"/><i/></r>'

    def test_no_match(self):
        outcome = set_attribute("<r><i/></r>", "j", "n", "1")

        assert not outcome.matched
        assert outcome.content is None

    def test_invalid_attribute_name(self):
        with pytest.raises(ValueError, match="Invalid attribute name"):
            AttributeSetter("i", "bad name", "1")

    def test_malformed_document(self):
        with pytest.raises(MarkupParseError):
            set_attribute("<r><i></r>", "i", "n", "1")

    def test_duplicate_attribute_replaces_first(self):
        setter = AttributeSetter("i", "n", "x")

        outcome = setter.run('<r><i n="1" n="2"/></r>')

        assert outcome.content == '<r><i n="x" n="2"/></r>'
