"""Centralized error codes and exception types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

__all__ = [
    "INVALID_CONFIG",
    "INVALID_TAG_FORMAT",
    "UNSUPPORTED_TYPE",
    "ConfiguratorError",
    "InvalidConfigError",
    "InvalidTagFormatError",
    "UnsupportedTypeError",
    "error_payload",
]

INVALID_CONFIG = "INVALID_CONFIG"
INVALID_TAG_FORMAT = "INVALID_TAG_FORMAT"
UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"


@dataclass(slots=True)
class ConfiguratorError(Exception):
    """Domain-specific exception carrying an error code and message."""

    code: str
    message: str
    details: Mapping[str, Any] | None = None

    def __str__(self) -> str:  # pragma: no cover - delegation to message
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return error_payload(self.code, self.message, details=self.details)


class InvalidConfigError(ConfiguratorError):
    """The value handed to the walker is not a mutable dataclass tree."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        ConfiguratorError.__init__(self, INVALID_CONFIG, message, details)


class InvalidTagFormatError(ConfiguratorError):
    """A directive was written in its ``key=value`` form with an empty value."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        ConfiguratorError.__init__(self, INVALID_TAG_FORMAT, message, details)


class UnsupportedTypeError(ConfiguratorError):
    """No coercion rule exists for the declared field type."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        ConfiguratorError.__init__(self, UNSUPPORTED_TYPE, message, details)


def error_payload(code: str, message: str, *, details: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Build a structured error payload for callers that report errors as data."""

    payload: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if details:
        payload["details"] = dict(details)
    return payload
