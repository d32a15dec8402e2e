"""Configuration models."""

from .logging_config import FileLoggingConfig, LoggingConfig
from .watch_config import WatchConfig

__all__ = [
    "FileLoggingConfig",
    "LoggingConfig",
    "WatchConfig",
]
