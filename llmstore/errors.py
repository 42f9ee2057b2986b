"""Exception hierarchy for the LLM output store.

Request-level errors are mapped to HTTP responses by the API exception
handlers. Item-level errors are collected into a batch result instead.
"""
from __future__ import annotations


class LLMStoreError(Exception):
    """Base exception for all service failures."""


class ExtractionError(LLMStoreError):
    """Raised when a submitted payload does not contain valid JSON."""

    def __init__(self, message: str = "Invalid JSON format") -> None:
        super().__init__(message)


class CandidateValidationError(LLMStoreError):
    """Raised when a single batch item lacks a required field."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(reason)
        self.index = index
        self.reason = reason


class StoreError(LLMStoreError):
    """Raised when a store insert or query fails."""


class NotFoundError(LLMStoreError):
    """Raised when a requested record (or any record at all) is absent."""


class StoreConnectivityError(LLMStoreError):
    """Raised when the store cannot be reached during startup."""
