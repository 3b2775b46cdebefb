"""Network Activity Logger - request/response activity logging for HTTP clients."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.activity_logger import NetworkActivityLogger, get_shared_logger
from .core.config import ActivityLoggerConfig, LoggerLevel, OutputDestination
from .core.events import (
    RequestInfo,
    ResponseInfo,
    RequestStarted,
    RequestFinished,
    LifecycleSignals,
    default_signals,
)
from .core.exceptions import (
    NetworkActivityLoggerException,
    MalformedEventError,
    BodyDecodeError,
    SinkIOError,
    ConfigurationError,
)
from .core.env_config import load_from_env
from .core.logging import LoggingConfig
from .contrib.requests_adapter import ActivityHTTPAdapter, instrument_session
from .contrib.httpx_transport import ActivityTransport, AsyncActivityTransport

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure diagnostics themselves using logging.getLogger('network_activity_logger')
logging.getLogger('network_activity_logger').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("network-activity-logger")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "NetworkActivityLogger",
    "get_shared_logger",

    # Config
    "ActivityLoggerConfig",
    "LoggerLevel",
    "OutputDestination",
    "LoggingConfig",
    "load_from_env",

    # Events
    "RequestInfo",
    "ResponseInfo",
    "RequestStarted",
    "RequestFinished",
    "LifecycleSignals",
    "default_signals",

    # Bridges
    "ActivityHTTPAdapter",
    "instrument_session",
    "ActivityTransport",
    "AsyncActivityTransport",

    # Exceptions
    "NetworkActivityLoggerException",
    "MalformedEventError",
    "BodyDecodeError",
    "SinkIOError",
    "ConfigurationError",

    # Version
    "__version__",
]
