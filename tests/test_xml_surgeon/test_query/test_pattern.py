"""Tests for pattern parsing and matching."""

import pytest

from xml_surgeon.query import Pattern, parse_pattern, path_matches, predicate_matches
from xml_surgeon.tree import ElementRecord


class TestParsePattern:
    """Test pattern string parsing."""

    def test_predicate_pattern(self):
        assert parse_pattern("item[@id='123']") == Pattern("item", ("id", "123"))

    def test_path_pattern(self):
        assert parse_pattern("root/items/item") == Pattern("root/items/item", None)

    def test_double_quoted_value(self):
        assert parse_pattern('item[@id="7"]').predicate == ("id", "7")

    def test_unquoted_value(self):
        assert parse_pattern("item[@id=7]").predicate == ("id", "7")

    def test_whitespace_around_predicate_parts(self):
        assert parse_pattern("item[@ id = 'a b' ]").predicate == ("id", "a b")

    def test_value_containing_equals_and_brackets(self):
        pattern = parse_pattern("link[@href='a=b[1]']")

        assert pattern.path_suffix == "link"
        assert pattern.predicate == ("href", "a=b[1]")

    def test_predicate_without_equals_is_plain_path(self):
        assert parse_pattern("item[@id]") == Pattern("item[@id]")

    def test_unclosed_predicate_is_plain_path(self):
        assert parse_pattern("item[@id='1'") == Pattern("item[@id='1'")

    def test_str_round_trips_canonical_form(self):
        assert str(parse_pattern('item[@id="1"]')) == "item[@id='1']"
        assert str(parse_pattern("a/b")) == "a/b"


class TestPathMatches:
    """Test segment-aligned suffix matching."""

    @pytest.mark.parametrize("path, name, suffix, expected", [
        ("root/items/item", "item", "item", True),
        ("root/items/item", "item", "items/item", True),
        ("root/items/item", "item", "root/items/item", True),
        ("root/items/item", "item", "tem", False),
        ("root/items/item", "item", "ms/item", False),
        ("root/items/item", "item", "root/items", False),
        ("root/items", "items", "item", False),
        ("root", "root", "root", True),
        ("root/item", "item", "", False),
        ("x:root/x:item", "x:item", "x:item", True),
    ])
    def test_path_matches(self, path, name, suffix, expected):
        assert path_matches(path, name, suffix) is expected


class TestPredicateMatches:
    """Test attribute predicates."""

    def test_no_predicate_always_matches(self):
        assert predicate_matches([], None)

    def test_exact_match(self):
        assert predicate_matches([("a", "1"), ("id", "2")], ("id", "2"))

    def test_case_sensitive(self):
        assert not predicate_matches([("ID", "2")], ("id", "2"))
        assert not predicate_matches([("id", "A")], ("id", "a"))

    def test_missing_attribute(self):
        assert not predicate_matches([("a", "1")], ("id", "1"))


class TestPatternMatching:
    """Test Pattern against element records."""

    def test_matches_record(self):
        record = ElementRecord("root/items/item", "item", [("id", "2")], depth=2)

        assert parse_pattern("items/item[@id='2']").matches_record(record)
        assert not parse_pattern("items/item[@id='3']").matches_record(record)
        assert not parse_pattern("other/item[@id='2']").matches_record(record)
