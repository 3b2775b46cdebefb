"""
Pydantic validators for environment configuration.

Flat settings read from NETWORK_ACTIVITY_* variables and .env files.
"""

from pathlib import Path
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import LoggerLevel, OutputDestination


class DiagnosticsSettings(BaseModel):
    """Diagnostics logging configuration from environment."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING")
    format: Literal["json", "text"] = Field(default="text")
    enable_console: bool = Field(default=False)
    enable_file: bool = Field(default=False)
    file_path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="10MB")
    backup_count: int = Field(default=5, ge=0)

    @model_validator(mode="after")
    def require_file_path(self) -> "DiagnosticsSettings":
        """file_path is required when enable_file=True (also with the default path)."""
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        return self


class ActivityLoggerSettings(BaseSettings):
    """
    Activity logger configuration from environment variables.

    Reads from:
    1. Environment variables (NETWORK_ACTIVITY_*)
    2. .env file
    3. Defaults

    Example .env file:
        NETWORK_ACTIVITY_LEVEL=debug
        NETWORK_ACTIVITY_DESTINATION=multiple_files
        NETWORK_ACTIVITY_LOG_DIRECTORY=/tmp/my-app-network
        NETWORK_ACTIVITY_MASK_SENSITIVE_DATA=true
        NETWORK_ACTIVITY_LOG_ENABLE_CONSOLE=true
        NETWORK_ACTIVITY_LOG_LEVEL=DEBUG

    Usage:
        >>> settings = ActivityLoggerSettings()
        >>> settings.level
        'debug'
    """

    model_config = SettingsConfigDict(
        env_prefix='NETWORK_ACTIVITY_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Activity output
    level: str = Field(default="info", description="off, debug, info, warn, error, fatal")
    destination: str = Field(default="console", description="console, single_file, multiple_files")
    log_directory: Optional[Path] = Field(default=None, description="Directory for file destinations")
    single_file_name: str = Field(default="network-activity.log", min_length=1)
    queue_maxsize: int = Field(default=1000, ge=1)
    mask_sensitive_data: bool = Field(default=False)
    capture_response_body: bool = Field(default=True)

    # Diagnostics (flat structure for env vars)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=False)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        return _normalize_choice(v, [m.value for m in LoggerLevel], "level")

    @field_validator('destination')
    @classmethod
    def validate_destination(cls, v: str) -> str:
        return _normalize_choice(v, [m.value for m in OutputDestination], "destination")

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def require_log_file_path(self) -> "ActivityLoggerSettings":
        if self.log_enable_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return self

    def to_diagnostics_settings(self) -> Optional[DiagnosticsSettings]:
        """Convert to DiagnosticsSettings if any diagnostics output is enabled."""
        if not self.log_enable_file and not self.log_enable_console:
            return None

        return DiagnosticsSettings(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
        )


def _normalize_choice(value: str, allowed, name: str) -> str:
    normalized = value.strip().lower().replace("-", "_")
    if normalized not in allowed:
        raise ValueError(f"Unknown {name} {value!r}, expected one of: {', '.join(allowed)}")
    return normalized
