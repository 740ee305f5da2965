"""Configuration management for the search scorer."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import format_validation_errors, load_config, validate_config_file
from .models import (
    AppConfig,
    Condition,
    LogFormat,
    LogLevel,
    LoggingConfig,
    SearchConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    "format_validation_errors",
    # Configuration models
    "AppConfig",
    "Condition",
    "SearchConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
