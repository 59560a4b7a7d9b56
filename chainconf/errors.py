"""
Configuration errors.

Every load failure is fatal for node startup. Errors carry the dotted path
of the offending key and the constraint it violated.
"""

from typing import Optional


class MalformedNumber(ValueError):
    """Raised when a string is not a decimal or 0x-prefixed hex number."""


class ConfigError(ValueError):
    """Base class for configuration load failures."""

    def __init__(self, path: str, constraint: str, cause: Optional[Exception] = None):
        self.path = path
        self.constraint = constraint
        self.cause = cause
        super().__init__(f"{path}: {constraint}")


class MissingConfigKey(ConfigError):
    """A required key is absent."""

    def __init__(self, path: str):
        super().__init__(path, "required key is missing")


class MalformedConfigValue(ConfigError):
    """A value is present but cannot be converted to its target type."""


class ConfigConstraintError(ConfigError):
    """A value converted fine but violates a semantic check."""
