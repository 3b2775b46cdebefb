"""
Diagnostics logging configuration.

Controls where the logger's own messages go (swallowed sink failures,
dropped events, failing filter predicates). Activity records themselves are
written by sinks, not by this logger.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

_TEN_MEGABYTES = 10 * 1024 * 1024


class LogLevel(str, Enum):
    """Standard logging level names."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Record layout: one JSON object per line or key=value text."""
    JSON = "json"
    TEXT = "text"


def _coerce(enum_cls, value, normalize):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(normalize(str(value)))
    except ValueError:
        choices = "/".join(member.value for member in enum_cls)
        raise ValueError(f"{value!r} is not one of {choices}")


@dataclass(frozen=True)
class LoggingConfig:
    """
    Where diagnostics go and how they look.

    Console output goes to stderr so it never mixes with console activity
    records on stdout. Quiet by default: only WARNING and above.

    Example:
        >>> LoggingConfig.create(level="debug", format="json")
        >>> LoggingConfig.create(enable_console=False, enable_file=True,
        ...                      file_path="/tmp/activity-diagnostics.log")
    """

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = _TEN_MEGABYTES
    backup_count: int = 5
    # Attached to every diagnostics record
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "level", _coerce(LogLevel, self.level, str.upper))
        object.__setattr__(self, "format", _coerce(LogFormat, self.format, str.lower))

        if self.enable_file and not self.file_path:
            raise ValueError("enable_file=True needs a file_path")
        if min(self.max_bytes, self.backup_count) < 0:
            raise ValueError("max_bytes and backup_count cannot be negative")

    @classmethod
    def create(
        cls,
        level: Union[str, LogLevel] = LogLevel.WARNING,
        format: Union[str, LogFormat] = LogFormat.TEXT,
        extra_fields: Optional[Dict[str, Any]] = None,
        **options: Any
    ) -> "LoggingConfig":
        """
        Build from case-insensitive strings; remaining keyword options are
        passed through as fields (enable_console, enable_file, file_path,
        max_bytes, backup_count).
        """
        return cls(level=level, format=format, extra_fields=dict(extra_fields or {}), **options)
