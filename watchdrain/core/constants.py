"""Core constants for watchdrain."""

# CLI default deadline (seconds); the engine itself defaults to no deadline
DEFAULT_TIMER_SECONDS = 5 * 60.0

# How often a blocked drain tracker re-checks errors and cancellation
DEFAULT_POLL_INTERVAL = 0.05

# Prefix for worker thread names, used by leak checks
THREAD_NAME_PREFIX = "watchdrain-"
