"""Tests for dataknobs_verify.traverser module."""

from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from dataknobs_verify.traverser import DataTraverser, is_empty, split_path


class TestIsEmpty:
    """Emptiness of present and missing values."""

    @pytest.mark.parametrize("value", [False, 0, "0", 0.0, True, "a", [0], {"k": None}])
    def test_meaningful_values_are_not_empty(self, value):
        assert is_empty(value) is False

    @pytest.mark.parametrize("value", [None, "", [], {}, (), set(), SimpleNamespace()])
    def test_missing_values_are_empty(self, value):
        assert is_empty(value) is True

    def test_whitespace_string_is_not_empty(self):
        assert is_empty(" ") is False

    def test_empty_attribute_records(self):
        """Any attribute record without attributes is empty, not only namespaces."""

        class Blank:
            pass

        @dataclass
        class Point:
            x: int

        assert is_empty(Blank()) is True
        assert is_empty(Point(0)) is False


class TestResolve:
    """Segment path resolution."""

    def test_nested_mapping(self, user_record):
        """Mapping keys resolve segment by segment."""
        assert DataTraverser.resolve(user_record, ["user", "profile", "age"]) == 5

    def test_list_index_segment(self, user_record):
        """Numeric segments index lists."""
        assert DataTraverser.resolve(user_record, ["items", "1", "qty"]) == 0

    def test_index_out_of_range(self, user_record):
        assert DataTraverser.resolve(user_record, ["items", "5"]) is None

    def test_non_numeric_segment_on_list(self, user_record):
        assert DataTraverser.resolve(user_record, ["items", "first"]) is None

    def test_scalar_short_circuits(self, user_record):
        assert DataTraverser.resolve(user_record, ["name", "first"]) is None

    def test_keys_containing_dots(self):
        """Segments are matched as whole keys."""
        data = {"a.b": {"c": 1}}
        assert DataTraverser.resolve(data, ["a.b", "c"]) == 1

    def test_int_keyed_mapping(self):
        assert DataTraverser.resolve({1: "one"}, ["1"]) == "one"

    def test_attribute_records(self):
        """Attributes of plain objects resolve like keys."""
        @dataclass
        class Address:
            city: str

        data = SimpleNamespace(address=Address(city="Paris"))
        assert DataTraverser.resolve(data, ["address", "city"]) == "Paris"

    def test_empty_path_returns_root(self, user_record):
        assert DataTraverser.resolve(user_record, []) is user_record


class TestDataTraverser:
    """Dotted path access over the root record."""

    def test_dot_notation(self, user_record):
        """Dotted paths split into segments."""
        traverser = DataTraverser(user_record)
        assert traverser.get_field_value("user.tags.1") == "ops"

    def test_get_value_uses_exact_key(self):
        traverser = DataTraverser({"a.b": 1, "a": {"b": 2}})
        assert traverser.get_value("a.b") == 1
        assert traverser.get_field_value("a.b") == 2

    def test_split_path(self):
        assert split_path("a.b.c") == ["a", "b", "c"]
        assert split_path("") == []
