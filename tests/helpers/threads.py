"""Thread inspection helpers for leak checks."""

import threading

from watchdrain.core.constants import THREAD_NAME_PREFIX


def watchdrain_threads() -> list[threading.Thread]:
    """Live threads started by the watch engine."""
    return [t for t in threading.enumerate() if t.name.startswith(THREAD_NAME_PREFIX)]
