"""
Diagnostics logging for Network Activity Logger.

Example:
    >>> from network_activity_logger.core.logging import DiagnosticsLogger, LoggingConfig
    >>>
    >>> config = LoggingConfig.create(level="DEBUG", format="json")
    >>> diagnostics = DiagnosticsLogger(config)
    >>> diagnostics.warning("Sink write failed", destination="single_file")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import DiagnosticsLogger, DEFAULT_LOGGER_NAME
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .handlers import ExtraFieldsFilter, create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "DiagnosticsLogger",
    "DEFAULT_LOGGER_NAME",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    # Handlers
    "ExtraFieldsFilter",
    "create_console_handler",
    "create_file_handler",
]
