"""Service layer for watchdrain - the drain watch engine and its collaborators."""

from .churn_monitor import ChurnMonitor
from .coordination import EventChannel, ResultSlot
from .deadline_timer import DeadlineTimer
from .directory_state import DirectoryState
from .drain_tracker import DrainTracker
from .drain_watcher import DrainWatcher, watch_drain
from .notification_source import (
    DrainEventHandler,
    NotificationSource,
    WatchdogNotificationSource,
)

__all__ = [
    "ChurnMonitor",
    "DeadlineTimer",
    "DirectoryState",
    "DrainEventHandler",
    "DrainTracker",
    "DrainWatcher",
    "EventChannel",
    "NotificationSource",
    "ResultSlot",
    "WatchdogNotificationSource",
    "watch_drain",
]
