"""Configuration exceptions."""


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class ConfigValidationError(ConfigError):
    """Exception raised when a setting or request parameter is invalid.

    Raised locally before any network activity: a malformed API key, a
    missing event name, an empty recipient list.
    """

    pass


class ConfigFileNotFoundError(ConfigError):
    """Exception raised when a configuration file cannot be read."""

    pass
