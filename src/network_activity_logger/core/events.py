"""Lifecycle events and the signal hub host clients publish to."""

import logging
import threading
import time
import weakref
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional

from .exceptions import MalformedEventError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestInfo:
    """Description of an outbound request.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        url: Absolute request URL
        headers: Request header map
        body: Raw request body, if any
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


@dataclass(frozen=True)
class ResponseInfo:
    """HTTP response as seen by the logger."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None


@dataclass(frozen=True)
class RequestStarted:
    """A request was handed to the transport.

    ``timestamp`` is taken on the publishing thread (``time.monotonic()``),
    so elapsed times do not include the logger's queueing delay.
    """

    request_id: Hashable
    request: Optional[RequestInfo]
    timestamp: float = field(default_factory=time.monotonic)


@dataclass(frozen=True)
class RequestFinished:
    """A request completed, either with a response or a transport error.

    Attributes:
        request_id: Same identity as the matching RequestStarted
        request: Original request
        response: HTTP response (None on transport error)
        error: Transport-level exception (None when a response arrived)
        timestamp: Monotonic completion time
        elapsed: Host-measured duration in seconds, informational only
    """

    request_id: Hashable
    request: Optional[RequestInfo]
    response: Optional[ResponseInfo] = None
    error: Optional[BaseException] = None
    timestamp: float = field(default_factory=time.monotonic)
    elapsed: Optional[float] = None


def extract_request(event: Any) -> RequestInfo:
    """
    Validate the request part of a lifecycle event.

    Raises:
        MalformedEventError: request, method or URL missing or of the wrong type
    """
    request = getattr(event, "request", None)
    if not isinstance(request, RequestInfo):
        raise MalformedEventError("Event carries no request", field="request")
    if not isinstance(request.method, str) or not request.method:
        raise MalformedEventError("Request has no HTTP method", field="method")
    if not isinstance(request.url, str) or not request.url:
        raise MalformedEventError("Request has no URL", field="url")
    if getattr(event, "request_id", None) is None:
        raise MalformedEventError("Event has no request identity", field="request_id")
    return request


StartedHandler = Callable[[RequestStarted], None]
FinishedHandler = Callable[[RequestFinished], None]


class Subscription:
    """Handle returned by LifecycleSignals.connect()."""

    def __init__(self, signals: "LifecycleSignals", started: Callable[[], Optional[StartedHandler]],
                 finished: Callable[[], Optional[FinishedHandler]]):
        self._signals = weakref.ref(signals)
        self._started = started
        self._finished = finished

    @property
    def active(self) -> bool:
        signals = self._signals()
        return signals is not None and signals.is_connected(self)

    def cancel(self) -> None:
        """Disconnect; safe to call more than once."""
        signals = self._signals()
        if signals is not None:
            signals.disconnect(self)


def _strong(handler: Callable) -> Callable[[], Callable]:
    return lambda: handler


def _weak(handler: Callable) -> Callable[[], Optional[Callable]]:
    # Bound methods die immediately if referenced with weakref.ref
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return weakref.WeakMethod(handler)
    return weakref.ref(handler)


class LifecycleSignals:
    """
    Subscription hub for request lifecycle signals.

    Host client bridges call publish_started()/publish_finished(); observers
    connect() a pair of handlers. Publishing never raises: a failing handler
    is logged and skipped. Handlers run on the publishing thread and should
    return quickly.

    Example:
        >>> signals = LifecycleSignals()
        >>> sub = signals.connect(print, print)
        >>> signals.publish_started(RequestStarted("req-1", RequestInfo("GET", "https://a.b/")))
        >>> sub.cancel()
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []

    def connect(self, on_started: StartedHandler, on_finished: FinishedHandler,
                weak: bool = False) -> Subscription:
        """
        Register a handler pair.

        Args:
            on_started: Called with every RequestStarted
            on_finished: Called with every RequestFinished
            weak: Hold the handlers weakly; the subscription disappears once
                  the handlers' owner is garbage collected

        Returns:
            Subscription handle for disconnect()
        """
        ref = _weak if weak else _strong
        subscription = Subscription(self, ref(on_started), ref(on_finished))
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def disconnect(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def is_connected(self, subscription: Subscription) -> bool:
        with self._lock:
            self._prune()
            return subscription in self._subscriptions

    @property
    def subscriber_count(self) -> int:
        """Live subscriptions (dead weak ones are pruned)."""
        with self._lock:
            self._prune()
            return len(self._subscriptions)

    def publish_started(self, event: RequestStarted) -> None:
        for handler in self._handlers("_started"):
            self._call(handler, event)

    def publish_finished(self, event: RequestFinished) -> None:
        for handler in self._handlers("_finished"):
            self._call(handler, event)

    def _handlers(self, attr: str) -> List[Callable]:
        with self._lock:
            self._prune()
            handlers = [getattr(s, attr)() for s in self._subscriptions]
        return [h for h in handlers if h is not None]

    def _prune(self) -> None:
        self._subscriptions = [
            s for s in self._subscriptions
            if s._started() is not None and s._finished() is not None
        ]

    @staticmethod
    def _call(handler: Callable, event: Any) -> None:
        try:
            handler(event)
        except Exception:
            logger.exception("Lifecycle handler %r failed", handler)


# Process-wide hub used by bridges and loggers when none is passed explicitly
default_signals = LifecycleSignals()


def event_summary(event: Any) -> Dict[str, Any]:
    """Loggable fields describing an event (no headers or bodies)."""
    request = getattr(event, "request", None)
    return {
        "event": type(event).__name__,
        "request_id": str(getattr(event, "request_id", None)),
        "method": getattr(request, "method", None),
        "url": getattr(request, "url", None),
    }
