"""
Tests for custom exceptions and transport error classification.
"""

import httpx
import pytest
import requests

from network_activity_logger.core.exceptions import (
    BodyDecodeError,
    ConfigurationError,
    MalformedEventError,
    NetworkActivityLoggerException,
    SinkIOError,
    classify_transport_error,
    describe_transport_error,
)


class TestExceptionHierarchy:
    """Base classes and messages."""

    def test_all_inherit_from_base(self):
        for exc in (
            MalformedEventError("x"),
            BodyDecodeError("x"),
            SinkIOError("x"),
            ConfigurationError("x"),
        ):
            assert isinstance(exc, NetworkActivityLoggerException)

    def test_sink_error_is_os_error(self):
        assert isinstance(SinkIOError("disk full"), OSError)

    def test_configuration_error_is_value_error(self):
        assert isinstance(ConfigurationError("bad"), ValueError)

    def test_field_in_message(self):
        exc = MalformedEventError("Request has no URL", field="url")
        assert str(exc) == "Request has no URL (field: url)"
        assert exc.field == "url"

    def test_path_in_message(self):
        exc = SinkIOError("Log file write failed", path="/tmp/a.log")
        assert "/tmp/a.log" in str(exc)
        assert exc.path == "/tmp/a.log"

    def test_can_be_raised(self):
        with pytest.raises(NetworkActivityLoggerException) as exc_info:
            raise BodyDecodeError("binary", size=3)
        assert exc_info.value.size == 3


class TestClassifyTransportError:
    """Labels for requests and httpx exceptions."""

    @pytest.mark.parametrize("exc, label", [
        (requests.exceptions.ReadTimeout(), "Request timeout"),
        (requests.exceptions.ConnectTimeout(), "Request timeout"),
        (httpx.ConnectTimeout("t"), "Request timeout"),
        (requests.exceptions.ProxyError(), "Proxy error"),
        (httpx.ProxyError("p"), "Proxy error"),
        (requests.exceptions.ConnectionError(), "Connection error"),
        (httpx.ConnectError("c"), "Connection error"),
        (httpx.ReadError("r"), "Connection error"),
        (ValueError("v"), "ValueError"),
    ])
    def test_labels(self, exc, label):
        assert classify_transport_error(exc) == label

    def test_describe_with_message(self):
        assert describe_transport_error(httpx.ConnectError("refused")) == "Connection error: refused"

    def test_describe_without_message(self):
        assert describe_transport_error(RuntimeError()) == "RuntimeError"
