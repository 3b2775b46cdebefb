"""Core Network Activity Logger модули."""

from .config import (
    ActivityLoggerConfig,
    LoggerLevel,
    OutputDestination,
    FilterPredicate,
    DEFAULT_LOG_DIRECTORY,
    DEFAULT_SINGLE_FILE_NAME,
)
from .events import (
    RequestInfo,
    ResponseInfo,
    RequestStarted,
    RequestFinished,
    LifecycleSignals,
    Subscription,
    default_signals,
)
from .exceptions import (
    NetworkActivityLoggerException,
    MalformedEventError,
    BodyDecodeError,
    SinkIOError,
    ConfigurationError,
    classify_transport_error,
    describe_transport_error,
)
from .tracker import RequestTracker
from .formatter import Phase, Record, format_record, make_identifier
from .sinks import Sink, ConsoleSink, SingleFileSink, MultipleFilesSink, StatusMarker, create_sink
from .dispatch import SerialDispatcher
from .activity_logger import NetworkActivityLogger, get_shared_logger

__all__ = [
    # Config
    "ActivityLoggerConfig",
    "LoggerLevel",
    "OutputDestination",
    "FilterPredicate",
    "DEFAULT_LOG_DIRECTORY",
    "DEFAULT_SINGLE_FILE_NAME",
    # Events
    "RequestInfo",
    "ResponseInfo",
    "RequestStarted",
    "RequestFinished",
    "LifecycleSignals",
    "Subscription",
    "default_signals",
    # Pipeline
    "RequestTracker",
    "Phase",
    "Record",
    "format_record",
    "make_identifier",
    "Sink",
    "ConsoleSink",
    "SingleFileSink",
    "MultipleFilesSink",
    "StatusMarker",
    "create_sink",
    "SerialDispatcher",
    # Core
    "NetworkActivityLogger",
    "get_shared_logger",
    # Exceptions
    "NetworkActivityLoggerException",
    "MalformedEventError",
    "BodyDecodeError",
    "SinkIOError",
    "ConfigurationError",
    "classify_transport_error",
    "describe_transport_error",
]
