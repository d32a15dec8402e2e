"""Exception types for watchdrain."""

from .watch import (
    DeadlineExceededError,
    DirectoryOpenError,
    NotificationSourceError,
    ThresholdExceededError,
    WatchDrainError,
    WatchFailureError,
    WatchSetupError,
)

__all__ = [
    "DeadlineExceededError",
    "DirectoryOpenError",
    "NotificationSourceError",
    "ThresholdExceededError",
    "WatchDrainError",
    "WatchFailureError",
    "WatchSetupError",
]
