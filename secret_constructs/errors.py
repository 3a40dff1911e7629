"""Errors raised while declaring Secrets Manager constructs."""


class ConfigurationError(ValueError):
    """Construct configuration validation error."""

    pass
