"""
Environment configuration for Network Activity Logger.

Load configuration from .env files and environment variables.

Example:
    >>> from network_activity_logger.core.env_config import load_from_env
    >>>
    >>> # Load from .env
    >>> config = load_from_env()
    >>>
    >>> # Load with overrides
    >>> config = load_from_env(level="debug", destination="multiple_files")
"""

from .loader import load_from_env, print_config_summary
from .validator import ActivityLoggerSettings, DiagnosticsSettings

__all__ = [
    # Main loader
    "load_from_env",
    "print_config_summary",
    # Validators
    "ActivityLoggerSettings",
    "DiagnosticsSettings",
]
