"""
Pytest configuration and fixtures for network-activity-logger tests.
"""

import io
import itertools

import pytest
import responses as responses_lib

from network_activity_logger.core.activity_logger import NetworkActivityLogger
from network_activity_logger.core.config import ActivityLoggerConfig
from network_activity_logger.core.events import (
    LifecycleSignals,
    RequestFinished,
    RequestInfo,
    RequestStarted,
    ResponseInfo,
)
from network_activity_logger.core.logging.config import LoggingConfig


class EventFactory:
    """
    Builds matching RequestStarted/RequestFinished events with explicit
    timestamps, so elapsed times in assertions are exact.
    """

    def __init__(self):
        self._ids = itertools.count(1)

    def request(self, url="http://example.com/foo/bar.json", method="GET", headers=None, body=None):
        return RequestInfo(method=method, url=url, headers=headers or {}, body=body)

    def started(self, request, request_id=None, at=100.0):
        if request_id is None:
            request_id = f"req-{next(self._ids)}"
        return RequestStarted(request_id, request, timestamp=at)

    def succeeded(self, started, status_code=200, headers=None, body=None, at=100.5):
        response = ResponseInfo(status_code, headers or {}, body)
        return RequestFinished(started.request_id, started.request, response=response, timestamp=at)

    def failed(self, started, error, at=100.5):
        return RequestFinished(started.request_id, started.request, error=error, timestamp=at)


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def signals():
    """Private hub, so tests never see each other's subscribers."""
    return LifecycleSignals()


@pytest.fixture
def console():
    """In-memory replacement for stdout."""
    return io.StringIO()


@pytest.fixture
def events():
    """Event builder."""
    return EventFactory()


@pytest.fixture
def log_dir(tmp_path):
    """Log directory for file-based destinations."""
    return tmp_path / "activity-logs"


@pytest.fixture
def make_logger(signals, console, log_dir):
    """
    Factory for activity loggers wired to the test hub and console.

    Example:
        def test_something(make_logger):
            activity = make_logger(level="debug")
            activity.start_logging()
    """
    created = []

    def _make(**config_kwargs):
        config_kwargs.setdefault("log_directory", log_dir)
        config = ActivityLoggerConfig.create(**config_kwargs)
        activity = NetworkActivityLogger(config=config, signals=signals, stream=console)
        created.append(activity)
        return activity

    yield _make

    for activity in created:
        activity.close()


@pytest.fixture
def logging_config():
    """
    LoggingConfig fixture for diagnostics tests.

    Console-only, DEBUG, so every swallowed failure is visible.
    """
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )
