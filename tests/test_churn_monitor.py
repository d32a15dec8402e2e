"""Unit tests for ChurnMonitor."""

import threading

import pytest

from watchdrain.core.types import FileEvent, OutcomeKind
from watchdrain.services.churn_monitor import ChurnMonitor
from watchdrain.services.coordination import EventChannel, ResultSlot

CREATE = FileEvent.CREATE
REMOVE = FileEvent.REMOVE


def make_monitor(threshold):
    return ChurnMonitor(threshold, EventChannel(), ResultSlot(), threading.Event())


class TestObserve:
    def test_threshold_one_tolerates_single_outstanding_create(self):
        monitor = make_monitor(1)

        assert not monitor.observe(CREATE)
        assert monitor.observe(CREATE)

    def test_balanced_churn_is_tolerated_indefinitely(self):
        monitor = make_monitor(1)

        for _ in range(100):
            assert not monitor.observe(CREATE)
            assert not monitor.observe(REMOVE)

        assert monitor.creates == 100
        assert monitor.removes == 100

    def test_removes_offset_creates(self):
        monitor = make_monitor(1)

        assert not monitor.observe(CREATE)
        assert not monitor.observe(REMOVE)
        assert not monitor.observe(CREATE)
        assert monitor.observe(CREATE)

    def test_removes_alone_never_trigger(self):
        monitor = make_monitor(1)

        for _ in range(10):
            assert not monitor.observe(REMOVE)
        assert monitor.excess == -10

    @pytest.mark.parametrize("threshold", [1, 2, 5])
    def test_exceeded_only_when_strictly_greater(self, threshold):
        monitor = make_monitor(threshold)

        for _ in range(threshold):
            assert not monitor.observe(CREATE)
        assert monitor.observe(CREATE)

    def test_rejects_disabled_threshold(self):
        with pytest.raises(ValueError):
            make_monitor(0)


class TestRun:
    def _start(self, threshold):
        channel = EventChannel()
        results = ResultSlot()
        cancelled = threading.Event()
        monitor = ChurnMonitor(threshold, channel, results, cancelled)
        thread = threading.Thread(target=monitor.run)
        thread.start()
        return monitor, channel, results, cancelled, thread

    def test_publishes_threshold_exceeded_and_waits_for_cancel(self):
        monitor, channel, results, cancelled, thread = self._start(1)

        # create, remove, create, create: excess reaches 2
        for event in (CREATE, REMOVE, CREATE, CREATE):
            assert channel.send(event)

        assert results.wait(timeout=1).kind is OutcomeKind.THRESHOLD_EXCEEDED
        thread.join(timeout=0.05)
        assert thread.is_alive()

        cancelled.set()
        channel.close()
        thread.join(timeout=1)
        assert not thread.is_alive()

    def test_exits_silently_when_stream_closes(self):
        monitor, channel, results, cancelled, thread = self._start(1)

        assert channel.send(CREATE)
        assert channel.send(REMOVE)
        channel.close()
        thread.join(timeout=1)

        assert not thread.is_alive()
        with pytest.raises(TimeoutError):
            results.wait(timeout=0.01)
