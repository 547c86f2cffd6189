"""Exceptions raised while loading or validating archdex configuration."""


class ConfigError(Exception):
    """Raised when the configuration file or an override cannot be used."""
