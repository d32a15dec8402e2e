"""Drain tracker - follows notifications until the directory is empty.

The tracker is the only writer of the directory's file count. It consumes the
notification source until the count reaches zero, forwarding each counted
event to the churn monitor when one is running, and publishes either
``DRAINED`` or a ``WATCH_FAILURE`` when the source reports an error.
"""

from __future__ import annotations

import queue
import threading

from loguru import logger

from watchdrain.core.config.watch_config import WatchConfig
from watchdrain.core.exceptions.watch import NotificationSourceError
from watchdrain.core.types import FileEvent, Notification, Outcome
from watchdrain.services.coordination import EventChannel, ResultSlot, publish_and_wait
from watchdrain.services.directory_state import DirectoryState
from watchdrain.services.notification_source import NotificationSource


class DrainTracker:
    """Counts creates and removes until the watched directory drains."""

    def __init__(
        self,
        state: DirectoryState,
        source: NotificationSource,
        config: WatchConfig,
        results: ResultSlot[Outcome],
        cancelled: threading.Event,
        churn: EventChannel[FileEvent] | None = None,
    ):
        """Initialize drain tracker.

        Args:
            state: Directory state to update
            source: Notification source owned by the current watch
            config: Watch configuration
            results: Result slot shared with the other producers
            cancelled: Cancellation signal set by the arbiter
            churn: Channel to the churn monitor, when churn monitoring is enabled
        """
        self._state = state
        self._source = source
        self._config = config
        self._results = results
        self._cancelled = cancelled
        self._churn = churn
        self.events_processed = 0

    def run(self) -> None:
        """Thread entry point."""
        try:
            outcome = self._drain()
        finally:
            if self._churn is not None:
                self._churn.close()

        if outcome is None:
            return
        publish_and_wait(self._results, self._cancelled, outcome)

    def _drain(self) -> Outcome | None:
        """Consume notifications while the directory still holds files.

        Returns:
            The outcome to publish, or None if the watch ended underneath us
        """
        while not self._state.is_empty():
            if self._cancelled.is_set():
                return None

            # Source failures win over waiting for further events
            try:
                error = self._source.errors.get_nowait()
            except queue.Empty:
                pass
            else:
                logger.debug(f"DrainTracker: notification source failed: {error}")
                return Outcome.watch_failure(error)

            try:
                notification = self._source.events.get(timeout=self._config.poll_interval)
            except queue.Empty:
                if not self._source.is_alive():
                    return self._source_stopped()
                continue

            if notification is None:
                logger.debug("DrainTracker: notification source closed")
                return None

            if not self._apply(notification):
                return None

        logger.debug(f"DrainTracker: {self._state.path} drained")
        return Outcome.drained()

    def _source_stopped(self) -> Outcome | None:
        """Outcome for a source that stopped delivering events on its own."""
        if self._cancelled.is_set():
            return None

        # A failing source may stop just before its error is queued
        try:
            error = self._source.errors.get(timeout=self._config.poll_interval)
        except queue.Empty:
            error = NotificationSourceError("notification source stopped unexpectedly")
        logger.debug(f"DrainTracker: notification source failed: {error}")
        return Outcome.watch_failure(error)

    def _apply(self, notification: Notification) -> bool:
        """Update the count for one notification and forward it.

        Returns:
            False if forwarding failed because the watch is shutting down
        """
        if notification.is_directory:
            logger.debug(f"DrainTracker: ignoring directory {notification.event.value}: {notification.path}")
            return True

        if self._config.verbose:
            logger.info(f"{notification.event.value} EVENT: {notification.path}")

        if notification.event is FileEvent.REMOVE:
            self._state.decrement()
        else:
            self._state.increment()
        self.events_processed += 1

        if self._churn is not None:
            return self._churn.send(notification.event)
        return True
