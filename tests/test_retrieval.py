"""Tests for defensive decoding of stored list fields."""

from datetime import datetime

import pytest

from llmstore.models import AgentOutput
from llmstore.retrieval import decode_list_field, record_to_dict


@pytest.mark.parametrize(
    "stored, expected",
    [
        ('["a", "b"]', ["a", "b"]),
        (["a", "b"], ["a", "b"]),
        ("[1, null, \"x\"]", ["1", "x"]),
        ('[{"a": 1}, true, ["b"]]', ['{"a": 1}', "true", '["b"]']),
        ([{"a": 1}, "c"], ['{"a": 1}', "c"]),
        ("not json", []),
        ('"a string"', []),
        ('{"a": 1}', []),
        ("", []),
        (None, []),
    ],
)
def test_decode_list_field(stored, expected):
    assert decode_list_field(stored) == expected


def test_record_to_dict_decodes_both_list_fields():
    created = datetime(2024, 1, 2, 3, 4, 5)
    row = AgentOutput(
        id=9,
        heading="h",
        summary="s",
        keypoints='["k"]',
        tags="{broken",
        created_at=created,
    )

    assert record_to_dict(row) == {
        "id": 9,
        "heading": "h",
        "summary": "s",
        "keypoints": ["k"],
        "tags": [],
        "created_at": created,
    }
