"""Pull one JSON value out of a submitted payload.

Agents often wrap their JSON in a Markdown code fence, sometimes with a
language tag::

    Here is the result:
    ```json
    {"heading": "...", "summary": "..."}
    ```

Strings are first scanned for such a fenced block; if none is found the
whole string is parsed as JSON. Already-structured values pass through.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from ..errors import ExtractionError

logger = logging.getLogger(__name__)

FENCE = "```"
_TAG_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_+.-")


def _skip_language_tag(text: str, start: int) -> int:
    """Return the payload start after an optional language tag at ``start``."""
    end = start
    while end < len(text) and text[end] in _TAG_CHARS:
        end += 1
    if end == start:
        return start
    # A tag must be followed by whitespace, or directly by a JSON container
    # as in ```json{"a": 1}```.
    if end == len(text) or text[end].isspace() or text[end] in "{[":
        return end
    return start


def find_fenced_block(text: str) -> str | None:
    """Return the stripped payload of the first fenced block, if any.

    The first opening marker is paired with the next closing marker; an
    unterminated fence counts as no fence at all.
    """
    open_at = text.find(FENCE)
    if open_at == -1:
        return None

    payload_start = _skip_language_tag(text, open_at + len(FENCE))
    close_at = text.find(FENCE, payload_start)
    if close_at == -1:
        return None

    return text[payload_start:close_at].strip()


def extract_payload(raw: Any) -> Any:
    """Turn a submitted value into one structured JSON value.

    Args:
        raw: Decoded request body; a string, or an already-structured value

    Returns:
        The parsed JSON value (object, array or scalar)

    Raises:
        ExtractionError: If the string holds no parseable JSON
    """
    if not isinstance(raw, str):
        return raw

    fenced = find_fenced_block(raw)
    source = fenced if fenced is not None else raw.strip()

    try:
        return json.loads(source)
    except json.JSONDecodeError as e:
        where = "fenced block" if fenced is not None else "raw text"
        logger.warning(f"Failed to parse JSON from {where}: {e}")
        raise ExtractionError() from e
