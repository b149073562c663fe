"""Tests for replacing element text."""

import pytest

from xml_surgeon.mutation import TextUpdater, update_text
from xml_surgeon.tokenization import MarkupParseError
from xml_surgeon.tree import get_structure


class TestUpdateText:
    """Test single-match text replacement."""

    def test_simple_replacement(self):
        outcome = update_text("<root><name>Old</name></root>", "name", "New")

        assert outcome.matched
        assert outcome.content == "<root><name>New</name></root>"

    def test_only_first_match_changes(self):
        content = "<r><v>1</v><v>2</v></r>"

        outcome = update_text(content, "v", "x")

        assert outcome.content == "<r><v>x</v><v>2</v></r>"

    def test_predicate_targets_later_sibling(self):
        content = '<r><v id="a">1</v><v id="b">2</v></r>'

        outcome = update_text(content, "v[@id='b']", "x")

        assert outcome.content == '<r><v id="a">1</v><v id="b">x</v></r>'

    def test_no_match_returns_no_content(self):
        outcome = update_text("<r><v>1</v></r>", "w", "x")

        assert not outcome.matched
        assert outcome.content is None

    def test_surrounding_bytes_preserved(self):
        content = (
            '<?xml version="1.0"?>\n<!-- c -->\n<r  a = \'1\'>\r\n'
            "  <v>old</v>\r\n  <keep>&amp;</keep>\r\n</r>\n"
        )

        outcome = update_text(content, "v", "new")

        assert outcome.content == content.replace("old", "new")

    def test_new_text_is_escaped(self):
        outcome = update_text("<r><v>1</v></r>", "v", "a < b & c")

        assert outcome.content == "<r><v>a &lt; b &amp; c</v></r>"
        assert get_structure(outcome.content)[1].text == "a < b & c"

    def test_cdata_kept_as_cdata(self):
        outcome = update_text("<r><v><![CDATA[old]]></v></r>", "v", "<raw>")

        assert outcome.content == "<r><v><![CDATA[<raw>]]></v></r>"

    def test_cdata_terminator_falls_back_to_escaped_text(self):
        outcome = update_text("<r><v><![CDATA[old]]></v></r>", "v", "a]]>b")

        assert outcome.content == "<r><v>a]]&gt;b</v></r>"

    def test_leading_whitespace_and_children_kept(self):
        content = "<r>\n  <b>child</b>\n  text\n</r>"

        outcome = update_text(content, "r", "new")

        assert outcome.content == "<r>\n  <b>child</b>new</r>"

    def test_element_without_text_gets_text_before_close(self):
        outcome = update_text("<r><v><c/></v></r>", "v", "t")

        assert outcome.content == "<r><v><c/>t</v></r>"

    def test_self_closing_target_expanded(self):
        outcome = update_text('<r><v id="1"/></r>', "v", "t")

        assert outcome.content == '<r><v id="1">t</v></r>'

    def test_nested_same_name_targets_outer(self):
        outcome = update_text("<r><v><v>inner</v>outer</v></r>", "v", "x")

        assert outcome.content == "<r><v><v>inner</v>x</v></r>"

    def test_result_is_well_formed(self):
        outcome = update_text("<r><v>1</v></r>", "v", "</v><evil>")

        assert len(get_structure(outcome.content)) == 2

    def test_malformed_document_raises(self):
        with pytest.raises(MarkupParseError):
            update_text("<r><v>1</v>", "v", "x")

    def test_malformed_after_match_still_raises(self):
        with pytest.raises(MarkupParseError):
            update_text("<r><v>1</v></x>", "v", "x")

    def test_metrics_recorded(self):
        outcome = TextUpdater("v", "x").run("<r><v>1</v></r>")

        assert outcome.metrics.tokens_processed == 5
        assert outcome.metrics.characters_processed == len("<r><v>1</v></r>")
