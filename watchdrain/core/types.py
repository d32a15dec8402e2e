"""Core value types shared by the watch engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FileEvent(Enum):
    """File operation forwarded to the churn monitor."""

    CREATE = "CREATE"
    REMOVE = "REMOVE"


@dataclass(frozen=True)
class Notification:
    """A single change reported by a notification source.

    The path is only used for verbose logging; counting depends on the
    event tag and the directory flag.
    """

    event: FileEvent
    path: Path
    is_directory: bool = False


class OutcomeKind(Enum):
    """Discriminant for the terminal result of a watch."""

    DRAINED = "drained"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    THRESHOLD_EXCEEDED = "threshold_exceeded"
    WATCH_FAILURE = "watch_failure"


@dataclass(frozen=True)
class Outcome:
    """Terminal result published by exactly one producer per watch."""

    kind: OutcomeKind
    error: BaseException | None = None

    @classmethod
    def drained(cls) -> Outcome:
        return cls(OutcomeKind.DRAINED)

    @classmethod
    def deadline_exceeded(cls) -> Outcome:
        return cls(OutcomeKind.DEADLINE_EXCEEDED)

    @classmethod
    def threshold_exceeded(cls) -> Outcome:
        return cls(OutcomeKind.THRESHOLD_EXCEEDED)

    @classmethod
    def watch_failure(cls, error: BaseException) -> Outcome:
        return cls(OutcomeKind.WATCH_FAILURE, error)

    def raise_for_outcome(self) -> bool:
        """Return True for a drained outcome, raise the matching error otherwise."""
        from watchdrain.core.exceptions.watch import (
            DeadlineExceededError,
            ThresholdExceededError,
            WatchFailureError,
        )

        if self.kind is OutcomeKind.DRAINED:
            return True
        if self.kind is OutcomeKind.DEADLINE_EXCEEDED:
            raise DeadlineExceededError()
        if self.kind is OutcomeKind.THRESHOLD_EXCEEDED:
            raise ThresholdExceededError()
        if self.error is None:
            raise RuntimeError("watch failure outcome without an error")
        raise WatchFailureError(self.error) from self.error
