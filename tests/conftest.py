import os
import sys
import threading
import time

import pytest
from loguru import logger

from tests.helpers.fake_notification_source import FakeNotificationSource
from tests.helpers.filesystem import SEED_FILES, SUB_DIR, TEST_DIR, create_temp_file
from tests.helpers.threads import watchdrain_threads


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow stress tests",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: mark slow stress tests (use --run-slow)"
    )


def pytest_collection_modifyitems(config, items):
    # Slow tests - CLI flag or env var
    run_slow = (
        config.getoption("--run-slow")
        or os.getenv("WATCHDRAIN_RUN_SLOW_TESTS") == "1"
    )
    if not run_slow:
        skip_slow = pytest.mark.skip(
            reason="slow tests skipped (use --run-slow or WATCHDRAIN_RUN_SLOW_TESTS=1)"
        )
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure tests run without WATCHDRAIN_* overrides."""
    for k in [k for k in os.environ.keys() if k.startswith("WATCHDRAIN_")]:
        monkeypatch.delenv(k, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_logger():
    """Restore loguru's default sink after tests that reconfigure it."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def watch_dir(tmp_path):
    """Empty directory to watch, containing one subdirectory."""
    directory = tmp_path / TEST_DIR
    (directory / SUB_DIR).mkdir(parents=True)
    return directory


@pytest.fixture
def seeded_dir(watch_dir):
    """Watched directory seeded with two files."""
    for name in SEED_FILES:
        create_temp_file(watch_dir, name)
    return watch_dir


@pytest.fixture
def fake_source():
    return FakeNotificationSource()


@pytest.fixture
def thread_guard():
    """Fail if a test leaves threads running that it did not start with.

    Engine threads must be gone the moment ``watch`` returns; other threads
    (watchdog emitters) get a short grace period to finish joining.
    """
    before = set(threading.enumerate())
    yield
    assert watchdrain_threads() == []

    deadline = time.monotonic() + 2.0
    leaked = set(threading.enumerate()) - before
    while leaked and time.monotonic() < deadline:
        time.sleep(0.01)
        leaked = {t for t in set(threading.enumerate()) - before if t.is_alive()}
    assert not leaked, f"threads left running: {[t.name for t in leaked]}"
