"""Exception hierarchy for sqlbridge.

All public errors inherit from SQLBridgeError so callers can catch the base
class for any sqlbridge-specific failure.  Driver exceptions raised while a
query runs are never wrapped: they reach the caller unchanged.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .utils.connection_error_handler import ConnectionErrorInfo


class SQLBridgeError(Exception):
    """Base exception for all sqlbridge errors."""


class ConfigurationError(SQLBridgeError):
    """Raised for build or wiring defects: never retried."""


class DuplicateRegistrationError(ConfigurationError):
    """Raised when an engine identifier is registered twice.

    Args:
        db_type: The engine identifier that was already present.
    """

    def __init__(self, db_type: str) -> None:
        super().__init__(f"Database type '{db_type}' is already registered.")
        self.db_type = db_type


class UnknownEngineError(ConfigurationError):
    """Raised when an engine identifier has no registered Meta bundle."""

    def __init__(self, db_type: str, registered: list[str]) -> None:
        super().__init__(
            f"Unsupported database type: '{db_type}'. Registered types: {registered}."
        )
        self.db_type = db_type
        self.registered = registered


class UnsupportedCapabilityError(ConfigurationError):
    """Raised when a dialect is asked for a capability its engine cannot express."""

    def __init__(self, db_type: str, capability: str) -> None:
        super().__init__(f"{db_type} does not support {capability}.")
        self.db_type = db_type
        self.capability = capability


class ConnectivityError(SQLBridgeError):
    """Raised when a physical connection cannot be opened.

    Args:
        message: Human-readable description.
        info: Parsed, user-friendly description of the driver error.
    """

    def __init__(self, message: str, info: Optional["ConnectionErrorInfo"] = None) -> None:
        super().__init__(message)
        self.info = info


class MappingError(SQLBridgeError, LookupError):
    """Raised when a native type is not present in an engine's type table."""

    def __init__(self, db_type: str, type_name: str) -> None:
        super().__init__(f"{db_type} has no data type named '{type_name}'.")
        self.db_type = db_type
        self.type_name = type_name


class DecodeError(SQLBridgeError):
    """Raised when a catalog row holds a value of an unexpected type."""

    def __init__(self, key: str, expected: str, value: Any) -> None:
        super().__init__(
            f"Column '{key}': expected {expected}, got {type(value).__name__} ({value!r})."
        )
        self.key = key
        self.expected = expected
        self.value = value


class InvalidValueError(SQLBridgeError, ValueError):
    """Raised when a value cannot be rendered safely as a SQL literal."""
