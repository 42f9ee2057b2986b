"""Normalization of extracted payloads into batch candidates.

Also holds the coercion policies that turn loosely-typed agent fields into
canonical text and ``list[str]`` values.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_BULLET_MARKERS = ("-", "*", "•")


@dataclass(frozen=True)
class Candidate:
    """One unvalidated batch item and its position in the submission."""
    index: int
    item: Any


def to_candidates(value: Any) -> list[Candidate]:
    """Wrap a single value, or index every element of a list."""
    items = value if isinstance(value, list) else [value]
    return [Candidate(index=index, item=item) for index, item in enumerate(items)]


def coerce_text(value: Any) -> str:
    """Coerce a field to stripped text; only ``None`` becomes ``""``.

    Numbers, booleans and containers are rendered as their JSON text, so
    ``true`` becomes ``"true"`` and ``{"a": 1}`` becomes ``'{"a": 1}'``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return json.dumps(value, ensure_ascii=False)


def _strip_bullet(piece: str) -> str:
    piece = piece.strip()
    for marker in _BULLET_MARKERS:
        if piece.startswith(marker):
            return piece[len(marker):].strip()
    return piece


def _split_delimited(text: str) -> list[str]:
    separator = "\n" if "\n" in text else ","
    pieces = (_strip_bullet(piece) for piece in text.split(separator))
    return [piece for piece in pieces if piece]


def coerce_text_list(value: Any) -> list[str]:
    """Coerce a list-typed field to an ordered list of non-empty strings.

    Accepted shapes:
        - ``None`` -> ``[]``
        - list/tuple -> each element as text (objects and booleans as
          JSON text), ``None`` and empty ones dropped
        - string holding a JSON array -> decoded, then as above
        - other string -> split on newlines (or commas), bullets stripped
        - any other value -> one-element list of its JSON text
    """
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        texts = (coerce_text(element) for element in value if element is not None)
        return [text for text in texts if text]

    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                decoded = json.loads(stripped)
            except json.JSONDecodeError:
                logger.debug("List field looked like JSON but did not parse; splitting as text")
            else:
                if isinstance(decoded, list):
                    return coerce_text_list(decoded)
        return _split_delimited(stripped)

    text = coerce_text(value)
    return [text] if text else []
