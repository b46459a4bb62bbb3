"""Domain-specific errors for loudspin."""

from __future__ import annotations


class LoudspinError(Exception):
    """Base error for loudspin."""


class ConfigError(LoudspinError):
    """Base configuration error."""


class ConfigLoadError(ConfigError):
    """Raised when the configuration file cannot be opened or read."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration does not parse or match the schema."""


class InvalidLevelError(ConfigError):
    """Raised when a configured loudness level is outside the AAM range."""


class DevicePatternError(ConfigError):
    """Raised when a configured device pattern is malformed."""


class PrivilegeError(LoudspinError):
    """Raised when the required capabilities cannot be acquired."""


class LevelNotFoundError(LoudspinError):
    """Raised when a requested loudness level is not configured."""


class InvocationError(LoudspinError):
    """Raised when hdparm cannot be spawned or waited on."""


def format_error_chain(exc: BaseException) -> str:
    """Join an exception and its causes with ': ', outermost first."""
    messages: list[str] = []
    current: BaseException | None = exc
    while current is not None:
        messages.append(str(current))
        current = current.__cause__
    return ": ".join(messages)
