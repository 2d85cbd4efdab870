"""Custom exceptions for the auth_memory_adapter package."""

from __future__ import annotations


class AdapterError(Exception):
    """Base exception for all adapter-related errors."""


class RecordNotFoundError(AdapterError):
    """Raised when an update targets a record that does not exist.

    Lookups never raise this; they return ``None``.
    """

    def __init__(self, entity: str, key: str) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: '{key}'")


class AdapterConfigError(AdapterError):
    """Raised when the adapter is missing an operation it depends on."""

    def __init__(self, operation: str, message: str = "") -> None:
        self.operation = operation
        msg = f"Adapter does not implement '{operation}'"
        if message:
            msg += f": {message}"
        super().__init__(msg)


class AuthClientError(AdapterError):
    """Raised when a sign-in / sign-out flow cannot proceed."""
