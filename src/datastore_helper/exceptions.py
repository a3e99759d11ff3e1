"""Custom exceptions for the datastore_helper package."""

from __future__ import annotations


class DataStoreHelperError(Exception):
    """Base exception for all datastore_helper errors."""


class RemoteStoreError(DataStoreHelperError):
    """Raised by a remote backend when a single remote call fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Remote store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class SettingError(DataStoreHelperError):
    """Raised when a setting is looked up strictly and does not exist."""

    def __init__(self, name: object, message: str = "is not a valid setting") -> None:
        self.name = name
        super().__init__(f"Setting '{name}' {message}")


class ConfigError(DataStoreHelperError):
    """Raised when a helper or store is misconfigured."""
