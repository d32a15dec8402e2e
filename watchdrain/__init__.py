"""watchdrain - block until a directory drains of files.

Public API:
    DirectoryState, WatchConfig, DrainWatcher, watch_drain
"""

from watchdrain.core.config.watch_config import WatchConfig
from watchdrain.services.directory_state import DirectoryState
from watchdrain.services.drain_watcher import DrainWatcher, watch_drain

__version__ = "0.1.0"

__all__ = [
    "DirectoryState",
    "DrainWatcher",
    "WatchConfig",
    "watch_drain",
]
