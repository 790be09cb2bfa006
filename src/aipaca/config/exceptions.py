"""Custom exceptions for configuration management."""


class ConfigError(Exception):
    """Raised when configuration data cannot be processed."""


class MissingConfigError(ConfigError):
    """Raised when the configuration file has not been created yet."""
