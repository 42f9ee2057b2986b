"""Bounded startup connection to the store.

``CONNECTING`` moves to ``READY`` once a check succeeds, or to ``FAILED``
after ``max_attempts`` failed checks with a fixed delay between them.
``FAILED`` is terminal and raises :class:`StoreConnectivityError`.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

from tenacity import AsyncRetrying, stop_after_attempt, wait_fixed

from .errors import StoreConnectivityError

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """Startup connection state."""
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"


class StartupConnector:
    """Drive a connectivity check until it succeeds or attempts run out."""

    def __init__(
        self,
        check: Callable[[], Awaitable[None]],
        *,
        max_attempts: int,
        delay: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.delay = delay
        self.state = ConnectionState.CONNECTING
        self.attempts = 0
        self.last_error: Exception | None = None
        self._check = check
        self._sleep = sleep

    async def _attempt(self) -> None:
        self.attempts += 1
        try:
            await self._check()
        except Exception as e:
            self.last_error = e
            remaining = self.max_attempts - self.attempts
            logger.error(f"Store connection error ({remaining} retries left): {e}")
            raise

    async def connect(self) -> ConnectionState:
        """Run the state machine to a terminal state.

        Returns:
            ``ConnectionState.READY``

        Raises:
            StoreConnectivityError: If every attempt failed.
        """
        if self.state is ConnectionState.READY:
            return self.state
        if self.state is ConnectionState.FAILED:
            raise StoreConnectivityError(
                f"Store unreachable after {self.attempts} attempts: {self.last_error}"
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.delay),
            sleep=self._sleep,
            reraise=True,
        )
        try:
            await retrying(self._attempt)
        except Exception as e:
            self.state = ConnectionState.FAILED
            logger.critical(f"Failed to connect to the store after {self.attempts} attempts")
            raise StoreConnectivityError(
                f"Store unreachable after {self.attempts} attempts: {e}"
            ) from e

        self.state = ConnectionState.READY
        logger.info(f"Connected to the store after {self.attempts} attempt(s)")
        return self.state
