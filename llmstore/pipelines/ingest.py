"""Validation and best-effort batch persistence of agent output.

Items are handled strictly in submission order, one at a time. A failing
item is recorded with its index and the batch moves on; nothing is rolled
back across items.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Iterable, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from .. import store
from ..errors import CandidateValidationError, StoreError
from ..store import NewRecord
from .extraction import extract_payload
from .normalization import Candidate, coerce_text, coerce_text_list, to_candidates

logger = logging.getLogger(__name__)

MISSING_FIELDS = "Missing required fields: heading or summary"

InsertFn = Callable[[NewRecord], Awaitable[int]]


@dataclass(frozen=True)
class ItemError:
    """Failure of one batch item."""
    index: int
    error: str


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a whole batch, in processing order."""
    inserted: tuple[int, ...] = ()
    errors: tuple[ItemError, ...] = ()

    @property
    def success(self) -> bool:
        return len(self.inserted) > 0

    def with_inserted(self, record_id: int) -> BatchResult:
        return replace(self, inserted=self.inserted + (record_id,))

    def with_error(self, index: int, error: str) -> BatchResult:
        return replace(self, errors=self.errors + (ItemError(index=index, error=error),))


def validate_candidate(candidate: Candidate) -> NewRecord:
    """Check required fields and coerce the candidate into a record.

    Raises:
        CandidateValidationError: If heading or summary is missing or empty
    """
    item = candidate.item
    if not isinstance(item, Mapping):
        raise CandidateValidationError(candidate.index, MISSING_FIELDS)

    heading = coerce_text(item.get("heading"))
    summary = coerce_text(item.get("summary"))
    if not heading or not summary:
        raise CandidateValidationError(candidate.index, MISSING_FIELDS)

    return NewRecord(
        heading=heading,
        summary=summary,
        keypoints=coerce_text_list(item.get("keypoints")),
        tags=coerce_text_list(item.get("tags")),
    )


async def _step(result: BatchResult, candidate: Candidate, insert: InsertFn) -> BatchResult:
    try:
        record = validate_candidate(candidate)
    except CandidateValidationError as e:
        logger.warning(f"Item {e.index} rejected: {e.reason}")
        return result.with_error(e.index, e.reason)

    try:
        record_id = await insert(record)
    except StoreError as e:
        logger.warning(f"Item {candidate.index} failed to insert: {e}")
        return result.with_error(candidate.index, str(e))

    logger.info(f"Item {candidate.index} stored as record {record_id}")
    return result.with_inserted(record_id)


async def persist_batch(candidates: Iterable[Candidate], insert: InsertFn) -> BatchResult:
    """Fold the candidates into a :class:`BatchResult`.

    Args:
        candidates: Candidates in submission order
        insert: Async callable persisting one record and returning its id;
            it must raise :class:`StoreError` on failure

    Returns:
        BatchResult with inserted ids and per-item errors
    """
    result = BatchResult()
    for candidate in candidates:
        result = await _step(result, candidate, insert)

    logger.info(
        f"Batch finished: {len(result.inserted)} inserted, {len(result.errors)} failed"
    )
    return result


async def ingest_payload(session: AsyncSession, raw: Any) -> BatchResult:
    """Extract, normalize and persist a submitted payload.

    Raises:
        ExtractionError: If the payload holds no parseable JSON; nothing
            is persisted in that case
    """
    value = extract_payload(raw)
    candidates = to_candidates(value)
    logger.info(f"Ingesting batch of {len(candidates)} item(s)")

    async def insert(record: NewRecord) -> int:
        return await store.insert_record(session, record)

    return await persist_batch(candidates, insert)
