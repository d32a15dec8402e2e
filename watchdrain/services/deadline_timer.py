"""Deadline timer - ends the watch when the drain takes too long."""

from __future__ import annotations

import threading
import time

from loguru import logger

from watchdrain.core.types import Outcome
from watchdrain.services.coordination import ResultSlot, publish_and_wait


class DeadlineTimer:
    """Publishes ``DEADLINE_EXCEEDED`` once a monotonic deadline passes.

    The deadline is anchored when the watch starts, not when this thread is
    scheduled, so thread start-up latency never extends the allowed time.
    """

    def __init__(
        self,
        expires_at: float,
        results: ResultSlot[Outcome],
        cancelled: threading.Event,
    ):
        """Initialize deadline timer.

        Args:
            expires_at: ``time.monotonic()`` value at which the deadline passes
            results: Result slot shared with the other producers
            cancelled: Cancellation signal set by the arbiter
        """
        self._expires_at = expires_at
        self._results = results
        self._cancelled = cancelled

    def run(self) -> None:
        """Thread entry point."""
        # Event.wait can return early on some platforms; loop until the
        # monotonic deadline has really passed
        while True:
            remaining = self._expires_at - time.monotonic()
            if remaining <= 0:
                break
            if self._cancelled.wait(remaining):
                return

        if self._cancelled.is_set():
            return

        logger.debug("DeadlineTimer: deadline passed")
        publish_and_wait(self._results, self._cancelled, Outcome.deadline_exceeded())
