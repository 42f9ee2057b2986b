"""Read-only access to stored agent output.

``keypoints`` and ``tags`` are always returned as lists of strings, whether
the row holds serialized JSON text or a native array. Malformed list data
reads back as an empty list rather than failing the request.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from . import models, store
from .errors import NotFoundError

logger = logging.getLogger(__name__)


def decode_list_field(value: Any) -> list[str]:
    """Decode a stored list column into ``list[str]``, never raising."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.debug(f"Unparseable list field replaced with []: {value[:50]!r}")
            return []

    if not isinstance(value, list):
        return []
    return [
        element if isinstance(element, str) else json.dumps(element, ensure_ascii=False)
        for element in value
        if element is not None
    ]


def record_to_dict(row: models.AgentOutput) -> dict[str, Any]:
    return {
        "id": row.id,
        "heading": row.heading,
        "summary": row.summary,
        "keypoints": decode_list_field(row.keypoints),
        "tags": decode_list_field(row.tags),
        "created_at": row.created_at,
    }


async def list_all(session: AsyncSession) -> list[dict[str, Any]]:
    """All records, newest first.

    Raises:
        NotFoundError: If the store holds no records yet
    """
    rows = await store.fetch_all(session)
    if not rows:
        raise NotFoundError("No content found")
    return [record_to_dict(row) for row in rows]


async def list_summaries(session: AsyncSession) -> list[dict[str, Any]]:
    """Id, heading, summary and timestamp of every record, newest first.

    An empty store yields an empty list, unlike :func:`list_all`.
    """
    rows = await store.fetch_summaries(session)
    return [
        {
            "id": row.id,
            "heading": row.heading,
            "summary": row.summary,
            "created_at": row.created_at,
        }
        for row in rows
    ]


async def get_by_id(session: AsyncSession, record_id: int) -> dict[str, Any]:
    """One record by id.

    Raises:
        NotFoundError: If no record has that id
    """
    row = await store.fetch_by_id(session, record_id)
    if row is None:
        raise NotFoundError("Content not found")
    return record_to_dict(row)
