"""Shared fixtures: settings for a throwaway SQLite store and an API client."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from llmstore.api import create_app
from llmstore.config import DatabaseSettings, Environment, LoggingSettings, Settings


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "agent_outputs.db"


@pytest.fixture
def test_settings(db_path: Path) -> Settings:
    return Settings(
        environment=Environment.TESTING,
        db=DatabaseSettings(
            url=f"sqlite+aiosqlite:///{db_path}",
            connect_attempts=1,
            connect_delay=0,
        ),
        logging=LoggingSettings(level="WARNING", format="text"),
    )


@pytest.fixture
def client(test_settings: Settings):
    """Test client with the lifespan (connect + schema creation) applied."""
    with TestClient(create_app(test_settings)) as test_client:
        yield test_client


@pytest.fixture
def raw_db(client, db_path: Path):
    """Plain sqlite3 connection to the same file, for writing legacy rows."""
    conn = sqlite3.connect(db_path)
    try:
        yield conn
    finally:
        conn.close()
