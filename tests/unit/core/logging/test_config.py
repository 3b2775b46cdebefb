"""
Tests for diagnostics LoggingConfig.
"""

import pytest

from network_activity_logger.core.logging.config import LoggingConfig, LogLevel, LogFormat


class TestLoggingConfig:
    """LoggingConfig defaults and validation."""

    def test_defaults(self):
        config = LoggingConfig()

        assert config.level == LogLevel.WARNING
        assert config.format == LogFormat.TEXT
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.file_path is None
        assert config.extra_fields == {}

    def test_create_from_strings(self):
        config = LoggingConfig.create(level="debug", format="JSON")

        assert config.level == LogLevel.DEBUG
        assert config.format == LogFormat.JSON

    def test_file_requires_path(self):
        with pytest.raises(ValueError, match="needs a file_path"):
            LoggingConfig(enable_file=True)

    def test_negative_values_rejected(self):
        with pytest.raises(ValueError):
            LoggingConfig(max_bytes=-1)
        with pytest.raises(ValueError):
            LoggingConfig(backup_count=-1)

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            LoggingConfig.create(level="LOUD")

    def test_immutable(self):
        config = LoggingConfig()
        with pytest.raises(AttributeError):
            config.level = LogLevel.DEBUG

    def test_create_accepts_enums_and_options(self, tmp_path):
        config = LoggingConfig.create(
            level=LogLevel.ERROR,
            enable_console=False,
            enable_file=True,
            file_path=str(tmp_path / "diag.log"),
            extra_fields={"service": "billing"}
        )

        assert config.level == LogLevel.ERROR
        assert config.enable_console is False
        assert config.file_path.endswith("diag.log")
        assert config.extra_fields == {"service": "billing"}
