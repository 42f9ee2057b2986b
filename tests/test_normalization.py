"""Tests for candidate normalization and field coercion."""

from llmstore.pipelines.normalization import (
    Candidate,
    coerce_text,
    coerce_text_list,
    to_candidates,
)


def test_single_object_is_wrapped():
    obj = {"heading": "h"}
    assert to_candidates(obj) == [Candidate(index=0, item=obj)]


def test_list_keeps_order_and_positions():
    items = [{"heading": "a"}, None, {"heading": "c"}]
    candidates = to_candidates(items)
    assert [c.index for c in candidates] == [0, 1, 2]
    assert [c.item for c in candidates] == items


def test_empty_list_gives_no_candidates():
    assert to_candidates([]) == []


def test_scalar_is_wrapped():
    assert to_candidates(42) == [Candidate(index=0, item=42)]


def test_coerce_text():
    assert coerce_text("  Title  ") == "Title"
    assert coerce_text(7) == "7"
    assert coerce_text(2.5) == "2.5"
    assert coerce_text(None) == ""
    assert coerce_text(True) == "true"
    assert coerce_text(False) == "false"
    assert coerce_text({"a": 1}) == '{"a": 1}'
    assert coerce_text(["a"]) == '["a"]'


class TestCoerceTextList:
    """Each source shape maps to a list of strings."""

    def test_none(self):
        assert coerce_text_list(None) == []

    def test_list_elements_are_text(self):
        assert coerce_text_list(["a", 1, None, "  ", " b "]) == ["a", "1", "b"]

    def test_json_array_string(self):
        assert coerce_text_list('["x", "y"]') == ["x", "y"]

    def test_comma_delimited(self):
        assert coerce_text_list("ai, llm ,, agents") == ["ai", "llm", "agents"]

    def test_newline_delimited_bullets(self):
        text = "- first point\n* second, with comma\n\n• third\n"
        assert coerce_text_list(text) == ["first point", "second, with comma", "third"]

    def test_broken_json_array_is_split_as_text(self):
        assert coerce_text_list('["x", "y"') == ['["x"', '"y"']

    def test_number(self):
        assert coerce_text_list(5) == ["5"]

    def test_objects_and_booleans_kept_as_json_text(self):
        assert coerce_text_list([{"point": "x"}, "y", True, ["z"]]) == ['{"point": "x"}', "y", "true", '["z"]']

    def test_mapping(self):
        assert coerce_text_list({"a": 1}) == ['{"a": 1}']
