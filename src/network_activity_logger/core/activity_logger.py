# src/network_activity_logger/core/activity_logger.py
import atexit
import threading
import weakref
from typing import Any, Optional, TextIO

from .config import ActivityLoggerConfig, FilterPredicate, LoggerLevel, OutputDestination
from .dispatch import SerialDispatcher
from .events import (
    LifecycleSignals,
    RequestFinished,
    RequestInfo,
    RequestStarted,
    ResponseInfo,
    Subscription,
    default_signals,
    event_summary,
    extract_request,
)
from .exceptions import MalformedEventError, SinkIOError
from .formatter import Record, format_completed, format_failed, format_started
from .logging import DiagnosticsLogger
from .sinks import Sink, create_sink
from .tracker import RequestTracker

# Fields whose change requires a new sink
_SINK_FIELDS = frozenset({"destination", "log_directory", "single_file_name"})


class NetworkActivityLogger:
    """
    Logs requests and responses published on a LifecycleSignals hub.

    Two states: inactive (no subscription) and active (subscribed).
    start_logging() (re)subscribes, stop_logging() unsubscribes. Handlers only
    snapshot the configuration and enqueue; tracking, formatting and writing
    happen on one worker thread, in signal order.

    Nothing raised while processing an event reaches the host client:
    malformed events are dropped, sink failures are reported on the
    diagnostics logger and the record is lost.

    The hub holds the logger weakly: once the last reference to the logger is
    gone its subscription disappears.

    Example:
        >>> from network_activity_logger import NetworkActivityLogger, instrument_session
        >>> import requests
        >>>
        >>> session = instrument_session(requests.Session())
        >>> activity = NetworkActivityLogger()
        >>> activity.level = "debug"
        >>> activity.start_logging()
        >>> session.get("https://api.example.com/users")
        >>> activity.flush()
    """

    def __init__(
        self,
        config: Optional[ActivityLoggerConfig] = None,
        signals: Optional[LifecycleSignals] = None,
        stream: Optional[TextIO] = None
    ):
        """
        Args:
            config: Initial configuration (defaults: INFO to console)
            signals: Hub to subscribe to (default: process-wide default_signals)
            stream: Console stream override, mainly for tests
        """
        config = config or ActivityLoggerConfig()

        self._config = config
        self._config_lock = threading.RLock()
        self._signals = signals if signals is not None else default_signals
        self._subscription: Optional[Subscription] = None
        self._closed = False

        self._diagnostics = DiagnosticsLogger(config.diagnostics)
        self._tracker = RequestTracker()
        self._dispatcher = SerialDispatcher(maxsize=config.queue_maxsize)

        self._stream = stream
        self._sink_lock = threading.Lock()
        self._sink = self._build_sink(config)

        # Graceful shutdown: pending records are written at interpreter exit
        atexit.register(_atexit_cleanup, weakref.ref(self))

    # ==================== Configuration ====================

    @property
    def config(self) -> ActivityLoggerConfig:
        """Current configuration snapshot."""
        return self._config

    @property
    def level(self) -> LoggerLevel:
        return self._config.level

    @level.setter
    def level(self, value) -> None:
        self.configure(level=value)

    @property
    def filter_predicate(self) -> Optional[FilterPredicate]:
        return self._config.filter_predicate

    @filter_predicate.setter
    def filter_predicate(self, value: Optional[FilterPredicate]) -> None:
        self.configure(filter_predicate=value)

    @property
    def destination(self) -> OutputDestination:
        return self._config.destination

    @destination.setter
    def destination(self, value) -> None:
        """
        Switch output. Always builds a fresh sink; for file destinations the
        log directory is cleared before this returns.
        """
        self.configure(destination=value)

    def configure(self, **changes: Any) -> ActivityLoggerConfig:
        """
        Apply several configuration changes as one snapshot.

        Events signalled after this returns see all changes; none sees only
        part of them.

        Raises:
            ConfigurationError: invalid value (nothing is changed)

        Example:
            >>> activity.configure(level="warn", filter_predicate=lambda r: "health" in r.url)
        """
        with self._config_lock:
            config = self._config.with_changes(**changes)

            if _SINK_FIELDS.intersection(changes):
                with self._sink_lock:
                    old_sink = self._sink
                    self._sink = self._build_sink(config)
                    self._config = config
                    old_sink.close()
            else:
                self._config = config

            if "queue_maxsize" in changes:
                self._dispatcher.maxsize = config.queue_maxsize

            if "diagnostics" in changes:
                # Old handlers go first: close() restores the logger state
                self._diagnostics.close()
                self._diagnostics = DiagnosticsLogger(config.diagnostics)

            return config

    def _build_sink(self, config: ActivityLoggerConfig) -> Sink:
        sink = create_sink(config, self._stream)
        try:
            sink.prepare()
        except SinkIOError as e:
            # Writes recreate the directory; stale files may remain
            self._diagnostics.warning(
                "Log directory reset failed",
                destination=config.destination.value,
                error=str(e)
            )
        else:
            if config.destination.is_file_based:
                self._diagnostics.debug(
                    "Log directory reset",
                    destination=config.destination.value,
                    directory=str(config.log_directory)
                )
        return sink

    # ==================== Lifecycle ====================

    @property
    def is_logging(self) -> bool:
        subscription = self._subscription
        return subscription is not None and subscription.active

    def start_logging(self) -> None:
        """
        Subscribe to started/finished signals.

        Any previous subscription is removed first, so calling this twice
        leaves exactly one.
        """
        with self._config_lock:
            self._unsubscribe()
            if self._closed:
                self._diagnostics.warning("start_logging() called on a closed logger")
                return
            self._subscription = self._signals.connect(
                self._on_started, self._on_finished, weak=True
            )

    def stop_logging(self) -> None:
        """Unsubscribe. No-op when not logging."""
        with self._config_lock:
            self._unsubscribe()

    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until every event signalled so far has been written.

        Returns:
            False on timeout
        """
        return self._dispatcher.flush(timeout)

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """
        Stop logging, drain pending events, release the sink. Idempotent.
        """
        with self._config_lock:
            if self._closed:
                return
            self._unsubscribe()
            self._closed = True

        self._dispatcher.close(timeout)
        with self._sink_lock:
            self._sink.close()
        self._diagnostics.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __del__(self):
        """Dropping the logger unsubscribes it and lets the worker exit."""
        try:
            if getattr(self, "_subscription", None) is not None:
                self._subscription.cancel()
            if hasattr(self, "_dispatcher"):
                self._dispatcher.close(timeout=0)
        except Exception:
            # Interpreter shutdown
            pass

    # ==================== Statistics ====================

    @property
    def dropped_events(self) -> int:
        """Events discarded because the queue was full."""
        return self._dispatcher.dropped_count

    @property
    def in_flight(self) -> int:
        """Requests started but not yet finished."""
        return len(self._tracker)

    # ==================== Signal handlers (host threads) ====================

    def _on_started(self, event: RequestStarted) -> None:
        self._dispatcher.submit(self._process_started, event, self._config)

    def _on_finished(self, event: RequestFinished) -> None:
        self._dispatcher.submit(self._process_finished, event, self._config)

    # ==================== Processing (worker thread) ====================

    def _process_started(self, event: RequestStarted, config: ActivityLoggerConfig) -> None:
        request = self._extract(event)
        if request is None or self._is_filtered(request, config):
            return

        self._tracker.on_start(event.request_id, getattr(event, "timestamp", None))

        record = format_started(request, config.level, config.mask_sensitive_data)
        if record is not None:
            self._emit(record)

    def _process_finished(self, event: RequestFinished, config: ActivityLoggerConfig) -> None:
        request = self._extract(event)
        if request is None or self._is_filtered(request, config):
            return

        elapsed = self._tracker.on_finish(event.request_id, getattr(event, "timestamp", None))

        error = getattr(event, "error", None)
        response = getattr(event, "response", None)

        if error is not None:
            record = format_failed(request, error, config.level, elapsed, config.mask_sensitive_data)
        elif isinstance(response, ResponseInfo):
            record = format_completed(
                request, response, config.level, elapsed, config.mask_sensitive_data
            )
        else:
            self._diagnostics.debug(
                "Dropped finished event without response or error", **event_summary(event)
            )
            return

        if record is not None:
            self._emit(record)

    def _extract(self, event: Any) -> Optional[RequestInfo]:
        try:
            return extract_request(event)
        except MalformedEventError as e:
            self._diagnostics.debug("Dropped malformed event", reason=str(e), **event_summary(event))
            return None

    def _is_filtered(self, request: RequestInfo, config: ActivityLoggerConfig) -> bool:
        predicate = config.filter_predicate
        if predicate is None:
            return False
        try:
            return bool(predicate(request))
        except Exception:
            self._diagnostics.exception(
                "Filter predicate failed, request is logged", method=request.method, url=request.url
            )
            return False

    def _emit(self, record: Record) -> None:
        with self._sink_lock:
            sink = self._sink
            try:
                sink.send(record)
            except SinkIOError as e:
                self._diagnostics.warning(
                    "Sink write failed, record dropped",
                    destination=sink.destination.value,
                    identifier=record.identifier,
                    error=str(e)
                )


def _atexit_cleanup(ref: "weakref.ReferenceType[NetworkActivityLogger]") -> None:
    """Drain and close a logger that is still alive at interpreter exit."""
    try:
        activity = ref()
        if activity is not None:
            activity.close()
    except Exception:
        # Ignore errors during program termination
        pass


# Convenience default instance (lazy)
_shared_logger: Optional[NetworkActivityLogger] = None
_shared_lock = threading.Lock()


def get_shared_logger() -> NetworkActivityLogger:
    """
    Process-wide logger subscribed to default_signals once started.

    Example:
        >>> get_shared_logger().start_logging()
    """
    global _shared_logger

    with _shared_lock:
        if _shared_logger is None:
            _shared_logger = NetworkActivityLogger()
        return _shared_logger
