"""
Handlers and filters for diagnostics output.

Console diagnostics go to stderr: stdout belongs to the console sink, and
mixing the two would split activity records.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields to every record (service name, environment, ...).

    Fields already present on the record win.
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None
) -> logging.StreamHandler:
    """
    Create stderr handler.

    Example:
        >>> from .formatters import TextFormatter
        >>> handler = create_console_handler(logging.WARNING, TextFormatter())
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    for f in filters or []:
        handler.addFilter(f)

    return handler


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    filters: Optional[List[logging.Filter]] = None
) -> RotatingFileHandler:
    """
    Create rotating file handler.

    The parent directory is created if missing; the file itself is opened on
    the first emitted record (delay=True).

    File rotation:
        diagnostics.log       <- current
        diagnostics.log.1     <- previous
        ...
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8',
        delay=True
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)

    for f in filters or []:
        handler.addFilter(f)

    return handler
