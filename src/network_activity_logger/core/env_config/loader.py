"""
Configuration loader from environment variables and .env files.

Main entry point for loading configuration.
"""

from typing import Optional

from ..config import ActivityLoggerConfig, OutputDestination
from ..logging.config import LoggingConfig
from .validator import ActivityLoggerSettings


def load_from_env(
    env_file: Optional[str] = None,
    **overrides
) -> ActivityLoggerConfig:
    """
    Load ActivityLoggerConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (NETWORK_ACTIVITY_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path (default: .env in the working directory)
        **overrides: Explicit config overrides, named like the settings
                     fields (level, destination, log_level, ...), plus
                     filter_predicate which has no environment form

    Returns:
        ActivityLoggerConfig instance

    Raises:
        pydantic.ValidationError: invalid value from any source

    Example:
        >>> config = load_from_env()

        >>> config = load_from_env(
        ...     env_file=".env.staging",
        ...     level="debug"  # Override
        ... )
    """
    # Overrides go through the same validation as environment values
    settings_kwargs = {key: value for key, value in overrides.items() if key != 'filter_predicate'}
    if env_file is not None:
        settings_kwargs['_env_file'] = env_file

    settings = ActivityLoggerSettings(**settings_kwargs)

    # Build diagnostics config (if enabled)
    diagnostics = None
    diagnostics_settings = settings.to_diagnostics_settings()
    if diagnostics_settings:
        diagnostics = LoggingConfig.create(
            level=diagnostics_settings.level,
            format=diagnostics_settings.format,
            enable_console=diagnostics_settings.enable_console,
            enable_file=diagnostics_settings.enable_file,
            file_path=diagnostics_settings.file_path,
            max_bytes=diagnostics_settings.max_bytes,
            backup_count=diagnostics_settings.backup_count,
        )

    return ActivityLoggerConfig.create(
        level=settings.level,
        destination=settings.destination,
        filter_predicate=overrides.get('filter_predicate'),
        log_directory=settings.log_directory,
        single_file_name=settings.single_file_name,
        queue_maxsize=settings.queue_maxsize,
        mask_sensitive_data=settings.mask_sensitive_data,
        capture_response_body=settings.capture_response_body,
        diagnostics=diagnostics,
    )


def print_config_summary(config: ActivityLoggerConfig):
    """
    Print configuration summary.

    Useful for debugging and verification.

    Example:
        >>> print_config_summary(load_from_env())
        ActivityLoggerConfig:
          level: info
          destination: console
          ...
    """
    print("ActivityLoggerConfig:")
    print(f"  level: {config.level.value}")
    print(f"  destination: {config.destination.value}")
    if config.destination.is_file_based:
        print(f"    directory: {config.log_directory}")
        if config.destination is OutputDestination.SINGLE_FILE:
            print(f"    file: {config.single_file_name}")
    print(f"  filter: {'set' if config.filter_predicate else 'none'}")
    print(f"  queue_maxsize: {config.queue_maxsize}")
    print(f"  mask_sensitive_data: {config.mask_sensitive_data}")
    print(f"  capture_response_body: {config.capture_response_body}")

    if config.diagnostics:
        print(f"  diagnostics: level={config.diagnostics.level.value}, format={config.diagnostics.format.value}")
        if config.diagnostics.enable_file:
            print(f"    file: {config.diagnostics.file_path}")
