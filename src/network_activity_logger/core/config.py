"""
Configuration for Network Activity Logger.

ActivityLoggerConfig is immutable (frozen dataclass): the logger swaps whole
snapshots, so one processed event never sees a level from one update and a
predicate from another.
"""

import tempfile
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Union, TYPE_CHECKING

from .exceptions import ConfigurationError
from .logging.config import LoggingConfig

if TYPE_CHECKING:
    from .events import RequestInfo

FilterPredicate = Callable[["RequestInfo"], bool]

DEFAULT_LOG_DIRECTORY = Path(tempfile.gettempdir()) / "network-activity-logs"
DEFAULT_SINGLE_FILE_NAME = "network-activity.log"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ENUMS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class LoggerLevel(str, Enum):
    """
    Verbosity of activity records.

    - OFF: nothing
    - DEBUG: method, URL, headers and body for requests; status, URL, elapsed
      time, headers and body for responses
    - INFO: method and URL for requests; status, URL and elapsed time for
      responses
    - WARN: failed requests only
    - ERROR: same as WARN
    - FATAL: same as OFF
    """
    OFF = "off"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def logs_traffic(self) -> bool:
        """Start records and successful finishes are emitted."""
        return self in (LoggerLevel.DEBUG, LoggerLevel.INFO)

    @property
    def logs_failures(self) -> bool:
        """Transport error records are emitted."""
        return self in (LoggerLevel.DEBUG, LoggerLevel.INFO, LoggerLevel.WARN, LoggerLevel.ERROR)


class OutputDestination(str, Enum):
    """Which sink receives activity records."""
    CONSOLE = "console"
    SINGLE_FILE = "single_file"
    MULTIPLE_FILES = "multiple_files"

    @property
    def is_file_based(self) -> bool:
        return self is not OutputDestination.CONSOLE

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ACTIVITY LOGGER CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ActivityLoggerConfig:
    """
    Snapshot of everything that shapes activity output.

    Args:
        level: Verbosity (default INFO)
        destination: Active sink (default CONSOLE)
        filter_predicate: Requests for which it returns True are not logged
        log_directory: Directory for file-based destinations
        single_file_name: File name used by the single-file destination
        queue_maxsize: Pending events kept before the oldest is dropped
        mask_sensitive_data: Redact sensitive headers and URL parameters
        capture_response_body: Let host bridges built with this config read
                               response bodies
        diagnostics: Handlers for the logger's own diagnostics (None: forward
                     to the standard ``network_activity_logger`` logger)

    Examples:
        >>> ActivityLoggerConfig(level=LoggerLevel.DEBUG)
        >>> ActivityLoggerConfig.create(level="warn", destination="multiple_files")
    """
    level: LoggerLevel = LoggerLevel.INFO
    destination: OutputDestination = OutputDestination.CONSOLE
    filter_predicate: Optional[FilterPredicate] = None
    log_directory: Path = DEFAULT_LOG_DIRECTORY
    single_file_name: str = DEFAULT_SINGLE_FILE_NAME
    queue_maxsize: int = 1000
    mask_sensitive_data: bool = False
    capture_response_body: bool = True
    diagnostics: Optional[LoggingConfig] = None

    def __post_init__(self):
        """Coerce strings to enums and reject unusable values."""
        object.__setattr__(self, 'level', _parse_enum(LoggerLevel, self.level, "level"))
        object.__setattr__(
            self, 'destination', _parse_enum(OutputDestination, self.destination, "destination")
        )
        object.__setattr__(self, 'log_directory', Path(self.log_directory))

        if self.filter_predicate is not None and not callable(self.filter_predicate):
            raise ConfigurationError("filter_predicate must be callable or None")
        if self.queue_maxsize <= 0:
            raise ConfigurationError("queue_maxsize must be positive")
        name = self.single_file_name
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ConfigurationError(f"single_file_name must be a plain file name, got {name!r}")

    @classmethod
    def create(
        cls,
        level: str = "info",
        destination: str = "console",
        filter_predicate: Optional[FilterPredicate] = None,
        log_directory: Optional[Union[str, Path]] = None,
        single_file_name: str = DEFAULT_SINGLE_FILE_NAME,
        queue_maxsize: int = 1000,
        mask_sensitive_data: bool = False,
        capture_response_body: bool = True,
        diagnostics: Optional[LoggingConfig] = None,
    ) -> "ActivityLoggerConfig":
        """
        Create config from string values (case-insensitive).

        Example:
            >>> config = ActivityLoggerConfig.create(
            ...     level="DEBUG",
            ...     destination="single_file",
            ...     log_directory="/tmp/my-app-network"
            ... )
        """
        return cls(
            level=_parse_enum(LoggerLevel, level, "level"),
            destination=_parse_enum(OutputDestination, destination, "destination"),
            filter_predicate=filter_predicate,
            log_directory=Path(log_directory) if log_directory else DEFAULT_LOG_DIRECTORY,
            single_file_name=single_file_name,
            queue_maxsize=queue_maxsize,
            mask_sensitive_data=mask_sensitive_data,
            capture_response_body=capture_response_body,
            diagnostics=diagnostics,
        )

    def with_changes(self, **changes: Any) -> "ActivityLoggerConfig":
        """Return a copy with the given fields replaced."""
        try:
            return replace(self, **changes)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration field: {e}")


def _parse_enum(enum_cls, value, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower().replace("-", "_"))
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(f"Unknown {name}: {value!r}. Available: {allowed}")


def resolve_capture_response_body(
    capture_response_body: Optional[bool],
    config: Optional[ActivityLoggerConfig]
) -> bool:
    """
    Body capture setting for a host bridge.

    An explicit argument wins, then config.capture_response_body, then True.
    """
    if capture_response_body is not None:
        return capture_response_body
    if config is not None:
        return config.capture_response_body
    return True
