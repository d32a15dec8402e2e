"""Churn monitor - stops a watch that is filling up instead of draining.

The monitor keeps running totals of creates and removes forwarded by the
drain tracker. When outstanding creates (creates - removes) strictly exceed
the threshold, the directory is not going to drain and the watch stops
early. Balanced create/remove activity is tolerated indefinitely.
"""

from __future__ import annotations

import threading

from loguru import logger

from watchdrain.core.types import FileEvent, Outcome
from watchdrain.services.coordination import EventChannel, ResultSlot, publish_and_wait


class ChurnMonitor:
    """Watches the forwarded event stream for excess file creation."""

    def __init__(
        self,
        threshold: int,
        events: EventChannel[FileEvent],
        results: ResultSlot[Outcome],
        cancelled: threading.Event,
    ):
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        self._threshold = threshold
        self._events = events
        self._results = results
        self._cancelled = cancelled
        # Only touched by the monitor thread
        self.creates = 0
        self.removes = 0

    @property
    def excess(self) -> int:
        return self.creates - self.removes

    def observe(self, event: FileEvent) -> bool:
        """Apply one event.

        Returns:
            True if the threshold is now exceeded
        """
        if event is FileEvent.CREATE:
            self.creates += 1
        elif event is FileEvent.REMOVE:
            self.removes += 1
        return self.excess > self._threshold

    def run(self) -> None:
        """Thread entry point."""
        while True:
            event = self._events.receive()
            if event is None:
                # Tracker finished without exceeding the threshold
                return
            if self.observe(event):
                logger.debug(
                    f"ChurnMonitor: {self.creates} creates, {self.removes} removes "
                    f"exceed threshold {self._threshold}"
                )
                publish_and_wait(self._results, self._cancelled, Outcome.threshold_exceeded())
                return
