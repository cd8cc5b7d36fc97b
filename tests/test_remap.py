"""Tests for field remapping."""

import pytest

from extraction_bridge import remap
from extraction_bridge.remap import evaluate_expression, remap_output, resolve_path
from extraction_bridge.schemas import MappingRule


def rules(*raw):
    return [MappingRule.model_validate(r) for r in raw]


@pytest.fixture
def upper_processor(monkeypatch):
    """Register an "up" processor that records the values it sees."""
    seen = []

    def up(value):
        seen.append(value)
        return value.upper()

    monkeypatch.setitem(remap._processors, "up", up)
    return seen


def test_nested_path_and_static_fallback():
    raw = {"a": {"b": "v1"}, "c": "v2"}
    mapping = rules(
        {"FAL": "x", "DATA": "a|b"},
        {"FAL": "y", "DATA": ["missing|key", "static:default"]},
    )

    assert remap_output(raw, mapping) == {"x": "v1", "y": "default"}


def test_first_alternative_wins_and_is_processed(upper_processor):
    raw = {"a": "v1", "c": "v2"}
    mapping = rules({"FAL": "x", "DATA": ["a->up", "c"]})

    assert remap_output(raw, mapping) == {"x": "V1"}
    assert upper_processor == ["v1"]


def test_processor_skipped_when_path_missing(upper_processor):
    raw = {"c": "v2"}
    mapping = rules({"FAL": "x", "DATA": ["a->up", "c"]})

    assert remap_output(raw, mapping) == {"x": "v2"}
    assert upper_processor == []


def test_rule_without_value_contributes_nothing():
    mapping = rules({"FAL": "x", "DATA": ["nope", "a|nope"]}, {"FAL": "y", "DATA": "a"})
    assert remap_output({"a": "v"}, mapping) == {"y": "v"}


def test_static_segment_stops_walk():
    assert resolve_path({}, ["static:literal", "ignored"]) == "literal"
    assert resolve_path({"a": {}}, ["a", "static:x"]) == "x"


def test_missing_key_before_static_is_absent():
    assert resolve_path({}, ["missing", "static:x"]) is None


def test_static_value_kept_verbatim():
    assert resolve_path({}, ["static: spaced  value:with:colons"]) == " spaced  value:with:colons"


def test_list_index_segments():
    raw = {"streams": [{"codec": "h264"}, {"codec": "aac"}]}
    assert resolve_path(raw, ["streams", "1", "codec"]) == "aac"
    assert resolve_path(raw, ["streams", "5", "codec"]) is None
    assert resolve_path(raw, ["streams", "first"]) is None
    assert resolve_path(raw, ["streams", "²", "codec"]) is None


def test_none_value_counts_as_missing():
    mapping = rules({"FAL": "x", "DATA": ["a", "b"]})
    assert remap_output({"a": None, "b": "v"}, mapping) == {"x": "v"}


def test_falsy_values_are_kept():
    mapping = rules({"FAL": "zero", "DATA": "z"}, {"FAL": "empty", "DATA": "e"})
    assert remap_output({"z": 0, "e": ""}, mapping) == {"zero": 0, "empty": ""}


def test_walk_into_scalar_is_absent():
    assert resolve_path({"a": "text"}, ["a", "b"]) is None


def test_unknown_processor_fails_only_that_rule():
    mapping = rules(
        {"FAL": "x", "DATA": ["a->no_such_processor", "a"]},
        {"FAL": "y", "DATA": "a"},
    )

    assert remap_output({"a": "v"}, mapping) == {"y": "v"}


def test_processor_error_tries_next_alternative():
    mapping = rules({"FAL": "n", "DATA": ["text->int", "number->int"]})
    assert remap_output({"text": "abc", "number": "42"}, mapping) == {"n": 42}


def test_processor_returning_none_tries_next_alternative():
    mapping = rules({"FAL": "date", "DATA": ["bad->timestamp", "good->timestamp"]})
    result = remap_output({"bad": "not a date", "good": "1970-01-01 00:01:00"}, mapping)
    assert result == {"date": 60}


def test_output_key_written_once_per_rule():
    mapping = rules({"FAL": "x", "DATA": ["a", "b"]})
    assert remap_output({"a": 1, "b": 2}, mapping) == {"x": 1}


def test_later_rule_overwrites_same_target():
    mapping = rules({"FAL": "x", "DATA": "a"}, {"FAL": "x", "DATA": "b"})
    assert remap_output({"a": 1, "b": 2}, mapping) == {"x": 2}


@pytest.mark.parametrize(
    "expression,expected",
    [
        ("value->lower", "mixed case"),
        ("value->upper", "MIXED CASE"),
        ("padded->strip", "x"),
        ("number->int", 12),
        ("number->float", 12.5),
        ("infinite->float", None),
        ("words->join", "a, b"),
        ("exif_date->timestamp", 60),
    ],
)
def test_builtin_processors(expression, expected):
    raw = {
        "value": "Mixed Case",
        "padded": "  x ",
        "number": "12.5",
        "infinite": "inf",
        "words": ["a", "b"],
        "exif_date": "1970:01:01 00:01:00",
    }
    assert evaluate_expression(raw, expression) == expected


def test_register_processor(monkeypatch):
    monkeypatch.setattr(remap, "_processors", dict(remap._processors))
    remap.register_processor("reverse", lambda value: value[::-1])

    assert "reverse" in remap.list_processors()
    assert evaluate_expression({"a": "abc"}, "a->reverse") == "cba"
