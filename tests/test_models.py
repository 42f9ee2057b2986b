"""Tests for the per-dialect shape of the list columns."""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.schema import CreateTable

from llmstore.models import AgentOutput, JSONList


def ddl_for(dialect) -> str:
    return str(CreateTable(AgentOutput.__table__).compile(dialect=dialect))


def test_list_columns_are_jsonb_on_postgresql():
    ddl = ddl_for(postgresql.dialect())
    assert "keypoints JSONB" in ddl
    assert "tags JSONB" in ddl


def test_list_columns_are_text_on_sqlite():
    ddl = ddl_for(sqlite.dialect())
    assert "keypoints TEXT" in ddl
    assert "tags TEXT" in ddl


def test_bind_serializes_only_outside_postgresql():
    column_type = JSONList()
    assert column_type.process_bind_param(["a", "ü"], sqlite.dialect()) == '["a", "ü"]'
    assert column_type.process_bind_param(["a"], postgresql.dialect()) == ["a"]
    assert column_type.process_bind_param(None, sqlite.dialect()) is None
