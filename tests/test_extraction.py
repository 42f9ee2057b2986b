"""Tests for pulling JSON out of agent output."""

import pytest

from llmstore.errors import ExtractionError
from llmstore.pipelines.extraction import extract_payload, find_fenced_block


class TestFindFencedBlock:
    """Delimiter scan for fenced code blocks."""

    def test_no_fence(self):
        assert find_fenced_block('{"heading": "h"}') is None

    def test_fence_with_language_tag(self):
        text = 'Result:\n```json\n{"heading": "h"}\n```\nDone.'
        assert find_fenced_block(text) == '{"heading": "h"}'

    def test_fence_without_language_tag(self):
        assert find_fenced_block('```\n[1, 2]\n```') == "[1, 2]"

    def test_tag_directly_followed_by_json(self):
        assert find_fenced_block('```json{"a": 1}```') == '{"a": 1}'

    def test_single_line_fence_without_tag(self):
        assert find_fenced_block('```{"a": 1}```') == '{"a": 1}'

    def test_other_language_tags_are_skipped(self):
        assert find_fenced_block("```python3\nx = 1\n```") == "x = 1"

    def test_first_block_wins(self):
        text = '```json\n{"a": 1}\n```\nand\n```json\n{"a": 2}\n```'
        assert find_fenced_block(text) == '{"a": 1}'

    def test_unterminated_fence_is_not_a_block(self):
        assert find_fenced_block('```json\n{"a": 1}') is None


class TestExtractPayload:
    """Extraction of one JSON value from a submission."""

    def test_structured_values_pass_through(self):
        obj = {"heading": "h", "summary": "s"}
        items = [obj, obj]
        assert extract_payload(obj) is obj
        assert extract_payload(items) is items

    def test_fenced_json(self):
        text = 'Sure! Here it is:\n```json\n{"heading": "h", "summary": "s"}\n```'
        assert extract_payload(text) == {"heading": "h", "summary": "s"}

    def test_bare_json_string(self):
        assert extract_payload('  [{"heading": "h"}]  ') == [{"heading": "h"}]

    def test_numeric_fence_content_is_payload(self):
        # "123" is not followed by whitespace, so it is not a language tag
        assert extract_payload("```123```") == 123

    def test_invalid_text_rejected(self):
        with pytest.raises(ExtractionError) as exc_info:
            extract_payload("definitely not json")
        assert str(exc_info.value) == "Invalid JSON format"

    def test_invalid_fenced_content_rejected(self):
        with pytest.raises(ExtractionError):
            extract_payload("```json\n{heading: h}\n```")

    def test_unterminated_fence_falls_back_to_whole_string(self):
        with pytest.raises(ExtractionError):
            extract_payload('```json\n{"heading": "h", "summary": "s"}')

    def test_empty_string_rejected(self):
        with pytest.raises(ExtractionError):
            extract_payload("")
