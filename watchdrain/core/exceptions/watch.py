"""Watch exceptions - one class per terminal condition.

Setup failures (directory cannot be listed, path cannot be watched) are raised
before any background thread starts. The remaining classes are raised by
``DrainWatcher.watch`` once the single outcome of a watch is known, and carry
the matching ``OutcomeKind`` so callers can branch without isinstance chains.
"""

from watchdrain.core.types import OutcomeKind


class WatchDrainError(Exception):
    """Base exception for watchdrain operations."""

    kind: OutcomeKind | None = None


class WatchSetupError(WatchDrainError):
    """Raised when the watch cannot be started."""

    pass


class DirectoryOpenError(WatchSetupError):
    """Raised when the watched directory cannot be opened or listed."""

    pass


class DeadlineExceededError(WatchDrainError):
    """Raised when the directory did not drain before the deadline."""

    kind = OutcomeKind.DEADLINE_EXCEEDED

    def __init__(self, message: str = "timer ended"):
        super().__init__(message)


class ThresholdExceededError(WatchDrainError):
    """Raised when file creations outpace removals by more than the threshold."""

    kind = OutcomeKind.THRESHOLD_EXCEEDED

    def __init__(self, message: str = "threshold exceeded"):
        super().__init__(message)


class WatchFailureError(WatchDrainError):
    """Raised when the notification source reports an error mid-watch.

    The original error is kept on ``error`` and chained as ``__cause__``.
    """

    kind = OutcomeKind.WATCH_FAILURE

    def __init__(self, error: BaseException):
        super().__init__(str(error))
        self.error = error


class NotificationSourceError(Exception):
    """Error produced by a notification source while watching."""

    pass
