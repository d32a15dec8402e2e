"""Authoritative file count for the watched directory."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from loguru import logger

from watchdrain.core.exceptions.watch import DirectoryOpenError


def count_files(path: Path) -> int:
    """Count non-directory entries in a directory, ignoring subdirectories.

    Symlinks are not followed, so a link to a directory counts as a file.

    Raises:
        DirectoryOpenError: If the directory cannot be opened or listed
    """
    try:
        scanner = os.scandir(path)
    except OSError as e:
        raise DirectoryOpenError(f"failed to open directory: {e}") from e

    files = 0
    with scanner:
        try:
            for entry in scanner:
                if not entry.is_dir(follow_symlinks=False):
                    files += 1
        except OSError as e:
            raise DirectoryOpenError(f"failed to get file count: {e}") from e
    return files


class DirectoryState:
    """A directory and the number of files the engine believes it holds.

    Thread-safe: every read and write of the count happens under one lock.
    """

    def __init__(self, path: Path, file_count: int = 0):
        if file_count < 0:
            raise ValueError("file_count must be non-negative")
        self._path = Path(path)
        self._files = file_count
        self._lock = threading.Lock()

    @classmethod
    def from_path(cls, path: str | Path) -> DirectoryState:
        """Scan a directory and return its state."""
        dir_path = Path(path)
        files = count_files(dir_path)
        logger.debug(f"DirectoryState: {dir_path} holds {files} files")
        return cls(dir_path, files)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def file_count(self) -> int:
        with self._lock:
            return self._files

    def increment(self) -> None:
        with self._lock:
            self._files += 1

    def decrement(self) -> None:
        with self._lock:
            if self._files == 0:
                # Remove for a file created before the scan; nothing to take away
                logger.warning(f"DirectoryState: remove event with no counted files in {self._path}")
                return
            self._files -= 1

    def is_empty(self) -> bool:
        with self._lock:
            return self._files == 0

    def __repr__(self) -> str:
        return f"DirectoryState(path={str(self._path)!r}, file_count={self.file_count})"
