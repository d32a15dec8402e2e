"""Drain watcher - races the drain against a deadline and a churn threshold.

DrainWatcher owns one watch of one directory:
- Opens a notification source on the directory (setup failures are fatal)
- Starts the drain tracker, plus the deadline timer and churn monitor when
  configured, as threads sharing one cancellation signal and one result slot
- Blocks until the first outcome arrives
- Cancels, closes every resource and joins every thread before returning

Usage:
    state = DirectoryState.from_path("/var/spool/outgoing")
    config = WatchConfig(deadline=60, churn_threshold=10)
    drained = DrainWatcher(state, config).watch()
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from loguru import logger

from watchdrain.core.config.watch_config import WatchConfig
from watchdrain.core.constants import THREAD_NAME_PREFIX
from watchdrain.core.exceptions.watch import WatchSetupError
from watchdrain.core.types import FileEvent, Outcome
from watchdrain.services.churn_monitor import ChurnMonitor
from watchdrain.services.coordination import EventChannel, ResultSlot
from watchdrain.services.deadline_timer import DeadlineTimer
from watchdrain.services.directory_state import DirectoryState
from watchdrain.services.drain_tracker import DrainTracker
from watchdrain.services.notification_source import (
    NotificationSource,
    NotificationSourceFactory,
    WatchdogNotificationSource,
)


class DrainWatcher:
    """Single-shot watch of a directory draining of files."""

    def __init__(
        self,
        state: DirectoryState,
        config: WatchConfig | None = None,
        source_factory: NotificationSourceFactory = WatchdogNotificationSource,
    ):
        """Initialize drain watcher.

        Args:
            state: Scanned directory to watch
            config: Watch configuration (default: no deadline, no threshold)
            source_factory: Callable creating the notification source
        """
        self._state = state
        self._config = config or WatchConfig()
        self._source_factory = source_factory
        self._cancelled = threading.Event()
        self._results: ResultSlot[Outcome] = ResultSlot()
        self._threads: list[threading.Thread] = []
        self._source: NotificationSource | None = None
        self._churn: EventChannel[FileEvent] | None = None
        self._started = False
        self.outcome: Outcome | None = None

    def watch(self) -> bool:
        """Block until the directory drains or the watch is stopped.

        Returns:
            True once the directory is empty of files

        Raises:
            WatchSetupError: If the notification source cannot watch the directory
            DeadlineExceededError: If the deadline passed first
            ThresholdExceededError: If creates outpaced removes beyond the threshold
            WatchFailureError: If the notification source failed mid-watch
        """
        if self._started:
            raise RuntimeError("DrainWatcher.watch() can only be called once")
        self._started = True

        # Anchor the deadline before any setup work
        started_at = time.monotonic()
        source = self._open_source()
        self._source = source

        try:
            self._start_tasks(source, started_at)
            outcome = self._results.wait()
            self.outcome = outcome
            logger.debug(f"DrainWatcher: {self._state.path} finished with {outcome.kind.value}")
        finally:
            self._teardown()

        return outcome.raise_for_outcome()

    def _open_source(self) -> NotificationSource:
        try:
            source = self._source_factory()
        except Exception as e:
            raise WatchSetupError(f"failed to create notification source: {e}") from e

        try:
            source.add(self._state.path)
        except Exception as e:
            source.close()
            raise WatchSetupError(f"failed to watch {self._state.path}: {e}") from e
        return source

    def _spawn(self, name: str, target: Callable[[], None]) -> None:
        thread = threading.Thread(
            target=target,
            name=f"{THREAD_NAME_PREFIX}{name}",
            daemon=True,
        )
        self._threads.append(thread)
        thread.start()

    def _start_tasks(self, source: NotificationSource, started_at: float) -> None:
        if self._config.monitors_churn:
            self._churn = EventChannel()

        tracker = DrainTracker(
            state=self._state,
            source=source,
            config=self._config,
            results=self._results,
            cancelled=self._cancelled,
            churn=self._churn,
        )
        self._spawn("tracker", tracker.run)

        if self._config.has_deadline:
            timer = DeadlineTimer(
                expires_at=started_at + self._config.deadline,
                results=self._results,
                cancelled=self._cancelled,
            )
            self._spawn("timer", timer.run)

        if self._churn is not None:
            monitor = ChurnMonitor(
                threshold=self._config.churn_threshold,
                events=self._churn,
                results=self._results,
                cancelled=self._cancelled,
            )
            self._spawn("churn", monitor.run)

    def _teardown(self) -> None:
        """Release every producer and resource, then join all threads."""
        self._cancelled.set()
        self._results.close()
        if self._churn is not None:
            self._churn.close()
        if self._source is not None:
            self._source.close()

        for thread in self._threads:
            thread.join()
        self._threads.clear()
        logger.debug(f"DrainWatcher: stopped watching {self._state.path}")


def watch_drain(
    state: DirectoryState,
    config: WatchConfig | None = None,
    source_factory: NotificationSourceFactory = WatchdogNotificationSource,
) -> bool:
    """Watch a directory until it drains; see ``DrainWatcher.watch``."""
    return DrainWatcher(state, config, source_factory).watch()
