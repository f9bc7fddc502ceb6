"""Configuration module."""

from .config_loader import ClientConfig, Config, ConfigLoader, DispatcherConfig, LoggingConfig
from .exceptions import ConfigError, ConfigFileNotFoundError, ConfigValidationError

__all__ = [
    "ConfigLoader",
    "Config",
    "ClientConfig",
    "DispatcherConfig",
    "LoggingConfig",
    "ConfigError",
    "ConfigValidationError",
    "ConfigFileNotFoundError",
]
