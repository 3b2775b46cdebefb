"""
requests bridge.

Publishes lifecycle signals around HTTPAdapter.send(), so every request made
through a mounted session is visible to activity loggers.
"""

import time
import uuid
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from ..core.config import ActivityLoggerConfig, resolve_capture_response_body
from ..core.events import (
    LifecycleSignals,
    RequestFinished,
    RequestInfo,
    RequestStarted,
    ResponseInfo,
    default_signals,
)


def request_info_from_prepared(request: requests.PreparedRequest) -> RequestInfo:
    """RequestInfo for a prepared request (streamed bodies are not captured)."""
    body = request.body
    if isinstance(body, str):
        body = body.encode("utf-8")
    elif not isinstance(body, bytes):
        body = None

    return RequestInfo(
        method=request.method or "",
        url=request.url or "",
        headers=dict(request.headers),
        body=body
    )


class ActivityHTTPAdapter(HTTPAdapter):
    """
    HTTPAdapter that reports each send() to a LifecycleSignals hub.

    Transport exceptions are published as a failed finish and re-raised
    unchanged; the adapter never alters what the session sees.

    Example:
        >>> session = requests.Session()
        >>> adapter = ActivityHTTPAdapter(pool_maxsize=20)
        >>> session.mount("https://", adapter)
    """

    def __init__(
        self,
        signals: Optional[LifecycleSignals] = None,
        capture_response_body: Optional[bool] = None,
        config: Optional[ActivityLoggerConfig] = None,
        **kwargs
    ):
        """
        Args:
            signals: Hub to publish to (default: default_signals)
            capture_response_body: Read response.content for the finished
                                   event; ignored for stream=True requests
                                   (default: from config, else True)
            config: Activity logger config supplying capture_response_body
            **kwargs: Passed to HTTPAdapter (pool_connections, max_retries, ...)
        """
        self.signals = signals if signals is not None else default_signals
        self.capture_response_body = resolve_capture_response_body(capture_response_body, config)
        super().__init__(**kwargs)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        request_id = uuid.uuid4().hex
        info = request_info_from_prepared(request)
        started = time.monotonic()

        self.signals.publish_started(RequestStarted(request_id, info, timestamp=started))

        try:
            response = super().send(
                request, stream=stream, timeout=timeout, verify=verify, cert=cert, proxies=proxies
            )
            body = None
            if self.capture_response_body and not stream:
                # Consumes the stream; the session gets the cached content
                body = response.content
        except Exception as e:
            finished = time.monotonic()
            self.signals.publish_finished(RequestFinished(
                request_id, info, error=e, timestamp=finished, elapsed=finished - started
            ))
            raise

        finished = time.monotonic()
        self.signals.publish_finished(RequestFinished(
            request_id,
            info,
            response=ResponseInfo(response.status_code, dict(response.headers), body),
            timestamp=finished,
            elapsed=finished - started
        ))
        return response


def instrument_session(
    session: requests.Session,
    signals: Optional[LifecycleSignals] = None,
    capture_response_body: Optional[bool] = None,
    config: Optional[ActivityLoggerConfig] = None,
    **adapter_kwargs
) -> requests.Session:
    """
    Mount an ActivityHTTPAdapter for http:// and https:// on the session.

    Returns:
        The same session, for chaining

    Example:
        >>> session = instrument_session(requests.Session())
        >>> session = instrument_session(requests.Session(), config=load_from_env())
        >>> session.get("https://api.example.com/users")
    """
    adapter = ActivityHTTPAdapter(
        signals=signals,
        capture_response_body=capture_response_body,
        config=config,
        **adapter_kwargs
    )
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session
