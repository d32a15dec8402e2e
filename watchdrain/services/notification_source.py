"""File change notification sources for drain watches.

A notification source supplies, for one directory:
- an event queue of classified create/remove notifications
- an error queue for failures of the watch itself

The watch engine owns the source for the duration of one watch and closes it
before returning. After ``close`` no further notifications are queued and a
``None`` sentinel wakes any reader blocked on the event queue.

WatchdogNotificationSource runs a non-recursive watchdog Observer on the
directory. Events are translated on the observer thread and handed over
through thread-safe queues.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from loguru import logger
from watchdog.events import (
    DirDeletedEvent,
    DirMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from watchdrain.core.exceptions.watch import NotificationSourceError
from watchdrain.core.types import FileEvent, Notification


class NotificationSource(Protocol):
    """Live create/remove notifications for a single directory."""

    events: queue.Queue[Notification | None]
    errors: queue.Queue[Exception]

    def add(self, path: Path) -> None:
        """Register the directory to watch and start delivering events."""
        ...

    def is_alive(self) -> bool:
        """Whether events can still be delivered."""
        ...

    def close(self) -> None:
        """Stop watching and release resources; idempotent."""
        ...


NotificationSourceFactory = Callable[[], NotificationSource]


class DrainEventHandler(FileSystemEventHandler):
    """Event handler for a single watched directory.

    Classifies watchdog events into create/remove notifications for direct
    children of the directory and forwards them to a callback. Deletion or
    move of the watched directory itself is reported as an error.
    """

    def __init__(
        self,
        directory: Path,
        callback: Callable[[Notification], None],
        on_error: Callable[[Exception], None],
    ):
        """Initialize event handler.

        Args:
            directory: Directory being watched
            callback: Function to call with each classified notification
            on_error: Function to call when the watch itself fails
        """
        super().__init__()
        self.directory = directory
        self.callback = callback
        self.on_error = on_error

    def _normalize_path(self, path: str | bytes) -> Path:
        """Normalize path to canonical form."""
        if isinstance(path, bytes):
            path = path.decode()
        return Path(path).absolute()

    def _is_child(self, path: Path) -> bool:
        return path.parent == self.directory

    def _is_root(self, path: Path) -> bool:
        return path == self.directory

    def dispatch(self, event: FileSystemEvent) -> None:
        """Route events, turning handler failures into watch errors."""
        try:
            super().dispatch(event)
        except Exception as e:
            logger.exception(f"DrainEventHandler: failed to handle {event!r}")
            self.on_error(e)

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        path = self._normalize_path(event.src_path)
        if self._is_child(path):
            self.callback(Notification(FileEvent.CREATE, path, event.is_directory))

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle file deletion."""
        path = self._normalize_path(event.src_path)
        if isinstance(event, DirDeletedEvent) and self._is_root(path):
            self.on_error(NotificationSourceError(f"watched directory removed: {path}"))
            return
        if self._is_child(path):
            self.callback(Notification(FileEvent.REMOVE, path, event.is_directory))

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle file move/rename."""
        src_path = self._normalize_path(event.src_path)
        if isinstance(event, DirMovedEvent) and self._is_root(src_path):
            self.on_error(NotificationSourceError(f"watched directory moved: {src_path}"))
            return

        dest_path = self._normalize_path(event.dest_path)
        src_inside = self._is_child(src_path)
        dest_inside = self._is_child(dest_path)

        # Rename within the directory leaves the count unchanged
        if src_inside and dest_inside:
            return
        if src_inside:
            # Moving away: remove
            self.callback(Notification(FileEvent.REMOVE, src_path, event.is_directory))
        elif dest_inside:
            # Moving in: create
            self.callback(Notification(FileEvent.CREATE, dest_path, event.is_directory))


class WatchdogNotificationSource:
    """Notification source backed by a watchdog Observer.

    Usage:
        source = WatchdogNotificationSource()
        source.add(Path("/var/spool/outgoing"))
        notification = source.events.get()
        source.close()
    """

    def __init__(self) -> None:
        self.events: queue.Queue[Notification | None] = queue.Queue()
        self.errors: queue.Queue[Exception] = queue.Queue()
        self._observer: Observer | None = None
        self._directory: Path | None = None
        self._closed = False
        self._lock = threading.RLock()

    def _on_notification(self, notification: Notification) -> None:
        """Queue a notification; called from the watchdog thread."""
        with self._lock:
            if self._closed:
                return
            self.events.put(notification)

    def _on_error(self, error: Exception) -> None:
        """Queue a watch error; called from the watchdog thread."""
        with self._lock:
            if self._closed:
                return
            self.errors.put(error)

    def add(self, path: Path) -> None:
        """Start a non-recursive watch on a directory.

        Raises:
            NotificationSourceError: If the source is closed or already watching
            OSError: If the observer cannot watch the path
        """
        with self._lock:
            if self._closed:
                raise NotificationSourceError("notification source is closed")
            if self._observer is not None:
                raise NotificationSourceError(f"already watching {self._directory}")

            directory = Path(path).absolute()
            observer = Observer()
            handler = DrainEventHandler(
                directory=directory,
                callback=self._on_notification,
                on_error=self._on_error,
            )
            try:
                observer.schedule(handler, str(directory), recursive=False)
                observer.start()
            except Exception:
                observer.stop()
                raise

            self._observer = observer
            self._directory = directory
            logger.debug(f"WatchdogNotificationSource: watching {directory}")

    def is_alive(self) -> bool:
        """Check whether the observer and its emitter threads are still running.

        An emitter thread that dies on an unexpected error stops event delivery
        without reporting anything, so callers poll this while idle.
        """
        with self._lock:
            observer = self._observer
            if observer is None or self._closed or not observer.is_alive():
                return False
            return all(emitter.is_alive() for emitter in observer.emitters)

    def close(self) -> None:
        """Stop the observer, join its threads and wake readers."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            observer = self._observer

        if observer is not None:
            observer.stop()
            if observer.is_alive():
                observer.join()
            logger.debug(f"WatchdogNotificationSource: stopped watching {self._directory}")

        self.events.put(None)
