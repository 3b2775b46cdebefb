"""
Diagnostics logger.

Everything the activity logger swallows (sink failures, malformed events,
dropped queue items) is reported here so that silence in the activity log can
still be explained.
"""

import itertools
import logging
from typing import Any, Optional

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .handlers import ExtraFieldsFilter, create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data

DEFAULT_LOGGER_NAME = "network_activity_logger"

_instance_ids = itertools.count(1)


class DiagnosticsLogger:
    """
    Structured logger for the package's own diagnostics.

    Without a LoggingConfig, messages go to the standard
    ``network_activity_logger`` logger untouched (NullHandler by default), so
    applications configure it the usual way.

    With one, the instance logs through a private child logger
    (``network_activity_logger.<n>``) that owns its handlers and does not
    propagate. Several configured instances never share or remove each
    other's handlers.

    Example:
        >>> diagnostics = DiagnosticsLogger(LoggingConfig.create(level="DEBUG"))
        >>> diagnostics.warning("Sink write failed", destination="single_file")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = DEFAULT_LOGGER_NAME):
        self.config = config
        self._closed = False
        self._owns_handlers = config is not None

        if config is not None:
            name = f"{name}.{next(_instance_ids)}"
        self.name = name
        self._logger = logging.getLogger(name)

        if config is None:
            return

        level = self._get_level(config.level)
        self._logger.setLevel(level)
        self._logger.propagate = False

        filters = []
        if config.extra_fields:
            filters.append(ExtraFieldsFilter(config.extra_fields))

        formatter = get_formatter(config.format.value)

        if config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if config.enable_file and config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=config.max_bytes,
                backup_count=config.backup_count,
                filters=filters
            ))

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, extra=mask_sensitive_data(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, extra=mask_sensitive_data(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, extra=mask_sensitive_data(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, extra=mask_sensitive_data(kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log with traceback; call from an exception handler."""
        self._logger.exception(message, extra=mask_sensitive_data(kwargs))

    def close(self) -> None:
        """
        Close the handlers this instance installed.

        Idempotent. Handlers of an unconfigured (forwarding) instance belong to
        the application and are left alone.
        """
        if self._closed:
            return

        if self._owns_handlers:
            for handler in self._logger.handlers[:]:
                try:
                    handler.flush()
                    handler.close()
                except Exception:
                    pass
                self._logger.removeHandler(handler)
            # Late messages (a worker outliving close) go nowhere
            self._logger.addHandler(logging.NullHandler())

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
