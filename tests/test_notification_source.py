"""Tests for DrainEventHandler and WatchdogNotificationSource."""

import os
import queue
import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from tests.helpers.filesystem import create_temp_file
from watchdrain.core.exceptions.watch import NotificationSourceError
from watchdrain.core.types import FileEvent, Notification
from watchdrain.services.notification_source import (
    DrainEventHandler,
    WatchdogNotificationSource,
)

WATCHED = Path("/home/user/outgoing").absolute()


@pytest.fixture
def callback():
    return MagicMock()


@pytest.fixture
def on_error():
    return MagicMock()


@pytest.fixture
def handler(callback, on_error):
    return DrainEventHandler(directory=WATCHED, callback=callback, on_error=on_error)


class TestDrainEventHandler:
    """Tests for DrainEventHandler classification."""

    def test_file_created(self, handler, callback):
        handler.dispatch(FileCreatedEvent(str(WATCHED / "new.txt")))

        callback.assert_called_once_with(Notification(FileEvent.CREATE, WATCHED / "new.txt", False))

    def test_file_deleted(self, handler, callback):
        handler.dispatch(FileDeletedEvent(str(WATCHED / "old.txt")))

        callback.assert_called_once_with(Notification(FileEvent.REMOVE, WATCHED / "old.txt", False))

    def test_directory_events_are_flagged(self, handler, callback):
        handler.dispatch(DirCreatedEvent(str(WATCHED / "sub")))
        handler.dispatch(DirDeletedEvent(str(WATCHED / "sub")))

        notifications = [c.args[0] for c in callback.call_args_list]
        assert [n.event for n in notifications] == [FileEvent.CREATE, FileEvent.REMOVE]
        assert all(n.is_directory for n in notifications)

    def test_modified_is_ignored(self, handler, callback):
        handler.dispatch(FileModifiedEvent(str(WATCHED / "a.txt")))
        handler.dispatch(DirModifiedEvent(str(WATCHED)))

        callback.assert_not_called()

    def test_events_outside_directory_are_ignored(self, handler, callback):
        handler.dispatch(FileCreatedEvent(str(WATCHED / "sub" / "nested.txt")))
        handler.dispatch(FileDeletedEvent("/elsewhere/file.txt"))

        callback.assert_not_called()

    def test_rename_within_directory_is_ignored(self, handler, callback):
        handler.dispatch(FileMovedEvent(str(WATCHED / "a.tmp"), str(WATCHED / "a.txt")))

        callback.assert_not_called()

    def test_move_out_is_remove(self, handler, callback):
        handler.dispatch(FileMovedEvent(str(WATCHED / "a.txt"), "/archive/a.txt"))

        callback.assert_called_once_with(Notification(FileEvent.REMOVE, WATCHED / "a.txt", False))

    def test_move_in_is_create(self, handler, callback):
        handler.dispatch(FileMovedEvent("/incoming/a.txt", str(WATCHED / "a.txt")))

        callback.assert_called_once_with(Notification(FileEvent.CREATE, WATCHED / "a.txt", False))

    def test_watched_directory_deleted_is_an_error(self, handler, callback, on_error):
        handler.dispatch(DirDeletedEvent(str(WATCHED)))

        callback.assert_not_called()
        on_error.assert_called_once()
        assert isinstance(on_error.call_args.args[0], NotificationSourceError)

    def test_watched_directory_moved_is_an_error(self, handler, callback, on_error):
        handler.dispatch(DirMovedEvent(str(WATCHED), "/somewhere/else"))

        callback.assert_not_called()
        on_error.assert_called_once()

    def test_callback_failure_is_reported(self, handler, callback, on_error):
        callback.side_effect = RuntimeError("queue broken")

        handler.dispatch(FileCreatedEvent(str(WATCHED / "new.txt")))

        on_error.assert_called_once_with(callback.side_effect)


def next_notification(source, timeout=2.0):
    item = source.events.get(timeout=timeout)
    assert item is not None, "source closed unexpectedly"
    return item


class TestWatchdogNotificationSource:
    """Tests against a real watchdog observer on a temporary directory."""

    @pytest.fixture
    def source(self, watch_dir, thread_guard):
        source = WatchdogNotificationSource()
        source.add(watch_dir)
        yield source
        source.close()

    def test_reports_create_and_remove(self, source, watch_dir):
        path = create_temp_file(watch_dir, "temp1.txt")
        created = next_notification(source)

        path.unlink()
        removed = next_notification(source)

        assert created.event is FileEvent.CREATE
        assert created.path.name == "temp1.txt"
        assert not created.is_directory
        assert removed.event is FileEvent.REMOVE
        assert removed.path.name == "temp1.txt"

    def test_subdirectory_contents_are_not_reported(self, source, watch_dir):
        create_temp_file(watch_dir / "test-sub", "nested.txt")
        create_temp_file(watch_dir, "top.txt")

        notification = next_notification(source)

        assert notification.path.name == "top.txt"

    def test_new_subdirectory_is_flagged(self, source, watch_dir):
        (watch_dir / "another-sub").mkdir()

        notification = next_notification(source)

        assert notification.event is FileEvent.CREATE
        assert notification.is_directory

    def test_rename_within_directory_produces_no_notification(self, watch_dir, thread_guard):
        create_temp_file(watch_dir, "a.tmp")
        source = WatchdogNotificationSource()
        source.add(watch_dir)
        try:
            os.rename(watch_dir / "a.tmp", watch_dir / "a.txt")
            create_temp_file(watch_dir, "marker.txt")

            notification = next_notification(source)

            assert notification.path.name == "marker.txt"
        finally:
            source.close()

    def test_close_stops_observer_and_wakes_readers(self, watch_dir, thread_guard):
        source = WatchdogNotificationSource()
        source.add(watch_dir)
        assert source.is_alive()

        source.close()
        source.close()

        assert not source.is_alive()
        assert source.events.get(timeout=1) is None
        with pytest.raises(queue.Empty):
            source.events.get_nowait()

    def test_removed_directory_reports_error_and_stops(self, watch_dir, thread_guard):
        source = WatchdogNotificationSource()
        source.add(watch_dir)
        try:
            (watch_dir / "test-sub").rmdir()
            watch_dir.rmdir()

            error = source.errors.get(timeout=2)
            deadline = time.monotonic() + 2
            while source.is_alive() and time.monotonic() < deadline:
                time.sleep(0.01)

            assert "watched directory removed" in str(error)
            assert not source.is_alive()
        finally:
            source.close()

    def test_add_after_close_fails(self, watch_dir):
        source = WatchdogNotificationSource()
        source.close()

        with pytest.raises(NotificationSourceError):
            source.add(watch_dir)

    def test_add_twice_fails(self, source, watch_dir):
        with pytest.raises(NotificationSourceError):
            source.add(watch_dir)

    def test_missing_directory_cannot_be_watched(self, tmp_path, thread_guard):
        source = WatchdogNotificationSource()

        with pytest.raises(OSError):
            source.add(tmp_path / "missing")

        source.close()
        assert not source.is_alive()
