"""Record store queries over the ``agent_outputs`` table.

Every function takes the caller's :class:`AsyncSession`. Inserts commit
individually; a failed insert is rolled back so the same session can be
used for the next item.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import models
from .errors import StoreError

logger = logging.getLogger(__name__)


def _failure_message(e: SQLAlchemyError) -> str:
    """Driver message without the SQL statement and bound parameters."""
    orig = getattr(e, "orig", None)
    return str(orig) if orig is not None else str(e)


@dataclass(frozen=True)
class NewRecord:
    """A validated record, ready to insert."""
    heading: str
    summary: str
    keypoints: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


async def insert_record(session: AsyncSession, record: NewRecord) -> int:
    """Insert one record and commit it.

    Returns:
        The id assigned by the store

    Raises:
        StoreError: If the insert or commit fails
    """
    row = models.AgentOutput(
        heading=record.heading,
        summary=record.summary,
        keypoints=list(record.keypoints),
        tags=list(record.tags),
    )
    try:
        session.add(row)
        await session.flush()
        record_id = row.id
        await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"DB insert error: {_failure_message(e)}")
        await session.rollback()
        raise StoreError(_failure_message(e)) from e
    return record_id


async def fetch_all(session: AsyncSession) -> Sequence[models.AgentOutput]:
    """All records, newest id first."""
    query = select(models.AgentOutput).order_by(models.AgentOutput.id.desc())
    try:
        result = await session.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"DB select error: {_failure_message(e)}")
        raise StoreError(_failure_message(e)) from e
    return result.scalars().all()


async def fetch_summaries(session: AsyncSession) -> Sequence[Row]:
    """``(id, heading, summary, created_at)`` rows, newest id first."""
    table = models.AgentOutput
    query = (
        select(table.id, table.heading, table.summary, table.created_at)
        .order_by(table.id.desc())
    )
    try:
        result = await session.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"DB select error: {_failure_message(e)}")
        raise StoreError(_failure_message(e)) from e
    return result.all()


async def fetch_by_id(session: AsyncSession, record_id: int) -> models.AgentOutput | None:
    try:
        return await session.get(models.AgentOutput, record_id)
    except SQLAlchemyError as e:
        logger.error(f"DB select error: {_failure_message(e)}")
        raise StoreError(_failure_message(e)) from e
