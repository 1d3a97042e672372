"""Configuration management module for the reservation notifier."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_app_config, load_config
from .models import (
    AppConfig,
    BrandingConfig,
    EmailConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_app_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "BrandingConfig",
    "EmailConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
