"""Core SQLAlchemy models (2.x style) for the agent output store.

A single append-only table. List-typed columns are ``JSONB`` on PostgreSQL
and serialized JSON text elsewhere; see :mod:`llmstore.retrieval` for how
either shape is decoded on the way out.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class JSONList(TypeDecorator):
    """List column: native ``JSONB`` on PostgreSQL, JSON text elsewhere."""
    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        # JSONB serializes on its own
        if value is None or dialect.name == "postgresql":
            return value
        return json.dumps(value, ensure_ascii=False)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class AgentOutput(Base):
    """Structured records extracted from agent output."""
    __tablename__ = "agent_outputs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    heading: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    keypoints: Mapped[Any] = mapped_column(JSONList)
    tags: Mapped[Any] = mapped_column(JSONList)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_agent_outputs_created_at", "created_at"),
    )
