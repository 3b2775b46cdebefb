"""
Tests for diagnostics handlers.

Tests create_console_handler, create_file_handler and ExtraFieldsFilter.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from network_activity_logger.core.logging.handlers import (
    ExtraFieldsFilter,
    create_console_handler,
    create_file_handler,
)
from network_activity_logger.core.logging.formatters import TextFormatter


class TestCreateConsoleHandler:
    """Tests for create_console_handler function."""

    def test_creates_stream_handler(self):
        handler = create_console_handler(logging.INFO, TextFormatter())

        assert isinstance(handler, logging.StreamHandler)

    def test_handler_writes_to_stderr(self):
        """Diagnostics stay off stdout, which belongs to the console sink."""
        handler = create_console_handler(logging.INFO, TextFormatter())

        assert handler.stream is sys.stderr

    def test_level_and_formatter(self):
        formatter = TextFormatter()
        handler = create_console_handler(logging.DEBUG, formatter)

        assert handler.level == logging.DEBUG
        assert handler.formatter is formatter

    def test_handler_with_filters(self):
        f1 = ExtraFieldsFilter({"service": "test"})
        f2 = ExtraFieldsFilter({"env": "dev"})

        handler = create_console_handler(logging.INFO, TextFormatter(), filters=[f1, f2])

        assert f1 in handler.filters
        assert f2 in handler.filters


class TestCreateFileHandler:
    """Tests for create_file_handler function."""

    def test_creates_rotating_handler(self, tmp_path):
        handler = create_file_handler(
            str(tmp_path / "diag.log"), logging.WARNING, TextFormatter(), max_bytes=1024, backup_count=2
        )
        try:
            assert isinstance(handler, RotatingFileHandler)
            assert handler.maxBytes == 1024
            assert handler.backupCount == 2
        finally:
            handler.close()

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "diag.log"
        handler = create_file_handler(str(path), logging.WARNING, TextFormatter())
        handler.close()

        assert path.parent.is_dir()

    def test_file_created_lazily(self, tmp_path):
        path = tmp_path / "diag.log"
        handler = create_file_handler(str(path), logging.WARNING, TextFormatter())
        assert not path.exists()

        handler.emit(logging.LogRecord("x", logging.WARNING, __file__, 1, "hello", (), None))
        handler.close()

        assert "hello" in path.read_text(encoding="utf-8")


class TestExtraFieldsFilter:
    def test_adds_fields(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "m", (), None)
        ExtraFieldsFilter({"service": "api"}).filter(record)

        assert record.service == "api"

    def test_existing_fields_win(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "m", (), None)
        record.service = "own"

        assert ExtraFieldsFilter({"service": "api"}).filter(record) is True
        assert record.service == "own"
