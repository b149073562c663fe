"""Tests for the MarkupDocument editing session."""

import logging

import pytest

from xml_surgeon.api import MarkupDocument, load_file, load_string
from xml_surgeon.mutation import DeleteElement
from xml_surgeon.shared.config import EditorConfig, GlobalConfig
from xml_surgeon.tokenization import MarkupParseError


class TestScenarios:
    """End-to-end behaviour of the four edits and queries."""

    def test_insert_into_empty_parent(self):
        doc = load_string("<root><items></items></root>")

        assert doc.insert_element("items", "item", [("id", "1")], "x") is True
        assert '<items><item id="1">x</item></items>' in doc.get_content()

    def test_query_by_attribute(self):
        doc = load_string('<root><item id="1">First</item><item id="2">Second</item></root>')

        results = doc.query("item[@id='2']")

        assert len(results) == 1
        assert results[0].text == "Second"

    def test_update_text(self):
        doc = load_string("<root><name>Old</name></root>")

        assert doc.update_text("name", "New") is True
        assert "New" in doc.get_content()
        assert "Old" not in doc.get_content()

    def test_delete_by_attribute(self):
        doc = load_string('<root><item id="1">Keep</item><item id="2">Delete</item></root>')

        assert doc.delete_element("item[@id='2']") is True
        assert "Keep" in doc.content
        assert "Delete" not in doc.content
        assert len(doc.get_structure()) == 2


class TestMarkupDocument:
    """Test session state and history."""

    def test_unmatched_edit_leaves_content(self):
        original = "<root>\n  <a>1</a>\n</root>\n"
        doc = MarkupDocument.from_string(original)

        assert doc.update_text("b", "x") is False
        assert doc.set_attribute("b", "k", "v") is False
        assert doc.delete_element("b") is False
        assert doc.insert_element("b", "c") is False
        assert doc.get_content() == original
        assert doc.history == []
        assert not doc.modified

    def test_history_records_successful_edits(self):
        doc = load_string("<r><a>1</a></r>", correlation_id="session-7")

        doc.set_attribute("a", "k", "v")
        doc.delete_element("missing")
        doc.update_text("a", "2")

        assert [str(record) for record in doc.history] == [
            "set_attribute: a @k = 'v'",
            "update_text: a = '2'",
        ]
        assert doc.history[0].correlation_id == "session-7"
        assert doc.modified

    def test_sequential_edits_see_previous_results(self):
        doc = load_string("<r><list/></r>")

        doc.insert_element("list", "item", {"id": "1"})
        doc.insert_element("list", "item", {"id": "2"})
        doc.update_text("item[@id='2']", "second")

        assert doc.get_content() == (
            '<r><list><item id="1"/><item id="2">second</item></list></r>'
        )

    def test_repeated_deletes_walk_forward(self):
        doc = load_string("<r><i>1</i><i>2</i><i>3</i></r>")

        doc.delete_element("i")
        assert doc.query("i")[0].text == "2"
        doc.delete_element("i")
        assert doc.query("i")[0].text == "3"

    def test_repeated_set_attribute_is_idempotent(self):
        doc = load_string('<r><i a="1" b="2"/></r>')

        doc.set_attribute("i", "a", "9")
        once = doc.get_content()
        doc.set_attribute("i", "a", "9")

        assert doc.get_content() == once == '<r><i a="9" b="2"/></r>'

    def test_insert_accepts_mapping_in_order(self):
        doc = load_string("<r/>")

        doc.insert_element("r", "c", {"b": "1", "a": "2"})

        assert doc.get_content() == '<r><c b="1" a="2"/></r>'

    def test_malformed_content_raises_and_keeps_content(self, caplog):
        doc = load_string("<r><a></r>")

        with caplog.at_level(logging.WARNING, logger="xml_surgeon.api.document"):
            with pytest.raises(MarkupParseError):
                doc.update_text("a", "x")

        assert doc.get_content() == "<r><a></r>"
        assert "not well-formed" in caplog.text

    def test_invalid_name_raises_value_error(self):
        doc = load_string("<r/>")

        with pytest.raises(ValueError, match="Invalid element name"):
            doc.insert_element("r", "1bad")
        assert doc.get_content() == "<r/>"

    def test_apply_operation_object(self):
        doc = load_string("<r><a/><b/></r>")

        assert doc.apply(DeleteElement("b")) is True
        assert doc.get_content() == "<r><a/></r>"

    def test_get_element(self):
        doc = load_string("<r><a>1</a></r>")

        assert doc.get_element("r/a").text == "1"
        assert doc.get_element("a") is None

    def test_query_respects_config(self):
        items = "".join("<i/>" for _ in range(8))
        doc = load_string(f"<r>{items}</r>", config=EditorConfig.compact())

        assert len(doc.query("i")) == 5
        assert len(doc.query("i", limit=8)) == 8

    def test_correlation_tracking_disabled(self):
        config = EditorConfig(global_=GlobalConfig(enable_correlation_tracking=False))

        doc = load_string("<r/>", config=config, correlation_id="ignored")

        assert doc.correlation_id is None


class TestPersistence:
    """Test loading and committing files."""

    def test_load_edit_commit(self, tmp_path):
        path = tmp_path / "doc.xml"
        path.write_bytes(b'<?xml version="1.0"?>\r\n<r>\r\n  <a>1</a>\r\n</r>\r\n')

        doc = load_file(path)
        doc.update_text("a", "2")
        written = doc.commit()

        assert written == path
        assert path.read_bytes() == b'<?xml version="1.0"?>\r\n<r>\r\n  <a>2</a>\r\n</r>\r\n'
        assert not doc.modified

    def test_commit_to_other_path(self, tmp_path):
        source = tmp_path / "in.xml"
        source.write_text("<r/>")
        target = tmp_path / "out.xml"

        doc = MarkupDocument.from_file(source)
        doc.set_attribute("r", "v", "1")
        doc.commit(target)

        assert source.read_text() == "<r/>"
        assert target.read_text() == '<r v="1"/>'

    def test_commit_without_source_requires_path(self):
        with pytest.raises(ValueError, match="No commit path"):
            load_string("<r/>").commit()

    def test_commit_string_document_to_path(self, tmp_path):
        target = tmp_path / "new.xml"

        load_string("<r/>").commit(str(target))

        assert target.read_text() == "<r/>"
