"""Thread hand-off primitives used by a single watch.

ResultSlot collects the one terminal outcome of a watch; EventChannel carries
classified events from the drain tracker to the churn monitor with at most
one event outstanding.
"""

from __future__ import annotations

import threading
from typing import Generic, TypeVar, cast

T = TypeVar("T")


class ResultSlot(Generic[T]):
    """Single-slot result sink that accepts only the first value.

    Producers call ``offer``; the consumer calls ``wait``. Once a value has
    been accepted, or the slot has been closed, further offers are rejected.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._filled = threading.Event()
        self._value: T | None = None
        self._closed = False

    def offer(self, value: T) -> bool:
        """Store value if the slot is still empty and open.

        Returns:
            True if this call delivered the result
        """
        with self._lock:
            if self._closed or self._filled.is_set():
                return False
            self._value = value
            self._filled.set()
            return True

    def wait(self, timeout: float | None = None) -> T:
        """Block until a value is delivered.

        Raises:
            TimeoutError: If no value arrives within timeout
        """
        if not self._filled.wait(timeout):
            raise TimeoutError("no result delivered")
        return cast(T, self._value)

    def close(self) -> None:
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed


class EventChannel(Generic[T]):
    """Unbuffered, closable hand-off between one sender and one receiver.

    ``send`` returns only after the receiver has taken the item, so at most
    one event is ever in flight. Closing wakes both sides: pending and later
    sends return False, and ``receive`` returns None once drained.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._item: T | None = None
        self._has_item = False
        self._closed = False

    def send(self, item: T) -> bool:
        """Hand item to the receiver, blocking until it is taken.

        Returns:
            True if the receiver took the item, False if the channel closed first
        """
        with self._cond:
            while self._has_item and not self._closed:
                self._cond.wait()
            if self._closed:
                return False
            self._item = item
            self._has_item = True
            self._cond.notify_all()
            while self._has_item and not self._closed:
                self._cond.wait()
            return not self._has_item

    def receive(self) -> T | None:
        """Take the next item, or return None once the channel is closed."""
        with self._cond:
            while not self._has_item and not self._closed:
                self._cond.wait()
            if not self._has_item:
                return None
            item = self._item
            self._item = None
            self._has_item = False
            self._cond.notify_all()
            return item

    def close(self) -> None:
        """Close the channel; idempotent."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed


def publish_and_wait(
    results: ResultSlot[T], cancelled: threading.Event, outcome: T
) -> bool:
    """Offer an outcome, then block until the watch is cancelled.

    A producer never exits between publishing and teardown, so the arbiter
    always finds it parked on the cancellation signal.

    Returns:
        True if this producer's outcome was the one accepted
    """
    delivered = results.offer(outcome)
    cancelled.wait()
    return delivered
