"""
ekstester/config/errors.py

Error taxonomy for configuration resolution. Every error is terminal for
the current resolution attempt; there is no partial-success mode.

Filesystem failures are not wrapped: OSError propagates as raised.
"""

from __future__ import annotations

from typing import Optional


class ConfigError(Exception):
    """Base class for every error raised while loading or resolving a config."""


class ConfigValidationError(ConfigError, ValueError):
    """A field is missing, invalid, or contradicts another field.

    Attributes:
        message (str): Describes the violated invariant and the offending values.
        field (Optional[str]): Dotted path of the first offending field, if known.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """
        Initialize a ConfigValidationError.

        Args:
            message (str): Describes the violated invariant and the offending values.
            field (Optional[str]): Dotted path of the first offending field.
        """
        super().__init__(message)
        self.field = field


class PlatformLimitError(ConfigValidationError):
    """A numeric field exceeds a documented platform ceiling."""


class PreconditionError(ConfigError):
    """A required host tool is missing. Fatal at startup."""


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "PlatformLimitError",
    "PreconditionError",
]
