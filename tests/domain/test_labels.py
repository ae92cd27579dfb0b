"""Tests for label coercion at the ingestion boundary."""

import pytest

from ea_discovery.schemas.labels import as_list, coerce_flag, coerce_label

pytestmark = pytest.mark.unit


class TestCoerceLabel:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Sales Cloud", "Sales Cloud"),
            ("", ""),
            (1, "1"),
            (2.0, "2"),
            (2.5, "2.5"),
            ({"name": "MuleSoft"}, "MuleSoft"),
            ({"description": "Order capture"}, "Order capture"),
            ({"text": "t"}, "t"),
            ({"value": 3}, "3"),
            ({"product": "Data Cloud"}, "Data Cloud"),
            ({"benefit": "Faster quotes"}, "Faster quotes"),
        ],
    )
    def test_resolves(self, value, expected):
        assert coerce_label(value) == expected

    def test_property_order(self):
        assert coerce_label({"text": "third", "description": "second", "name": "first"}) == "first"

    def test_empty_property_skipped(self):
        assert coerce_label({"name": "", "description": "fallthrough"}) == "fallthrough"

    @pytest.mark.parametrize("value", [None, True, [], ["a"], {}, {"other": "x"}, {"name": {"nested": 1}}])
    def test_unresolvable_uses_fallback(self, value):
        assert coerce_label(value, "Unnamed") == "Unnamed"

    def test_default_fallback_is_empty(self):
        assert coerce_label(None) == ""

    def test_xml_invalid_control_characters_removed(self):
        assert coerce_label("Phase\u000b1 \x00Launch\x1f") == "Phase1 Launch"
        assert coerce_label({"name": "a\u0001b"}) == "ab"

    def test_tab_and_newlines_kept(self):
        assert coerce_label("a\tb\nc\r") == "a\tb\nc\r"


class TestAsList:
    def test_none(self):
        assert as_list(None) == []

    def test_scalar_wrapped(self):
        assert as_list("Sales Cloud") == ["Sales Cloud"]

    def test_list_passthrough(self):
        value = [1, 2]
        assert as_list(value) is value


class TestCoerceFlag:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, True),
            (False, False),
            ("true", True),
            ("TRUE", True),
            (" True ", True),
            ("false", False),
            ("maybe", False),
            (1, False),
            (None, False),
            ({"value": True}, False),
        ],
    )
    def test_resolves(self, value, expected):
        assert coerce_flag(value) is expected
