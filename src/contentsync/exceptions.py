"""
contentsync exception hierarchy.

All domain-specific exceptions inherit from ContentSyncError, making it easy
to catch any sync error with a single base class while still allowing
fine-grained handling when needed.

Hierarchy::

    ContentSyncError
    ├── ConfigurationError        - missing/invalid CLI options, credentials file
    ├── LocalIOError              - local file open/read failure
    │   └── DiscoveryError        - local glob enumeration failure
    └── RemoteError               - object listing or put failure
"""

from __future__ import annotations


class ContentSyncError(Exception):
    """Base exception for all contentsync errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(ContentSyncError):
    """Raised when options or the credentials file are missing or invalid."""


# --- Local I/O ---------------------------------------------------------------


class LocalIOError(ContentSyncError):
    """Raised when a local file cannot be opened or read."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message, details={"path": path})
        self.path = path


class DiscoveryError(LocalIOError):
    """Raised when the local search glob cannot be enumerated."""


# --- Remote ------------------------------------------------------------------


class RemoteError(ContentSyncError):
    """Raised when a request against the object store fails."""

    def __init__(
        self,
        message: str,
        *,
        bucket: str | None = None,
        key: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message, details={"bucket": bucket, "key": key, "operation": operation})
        self.bucket = bucket
        self.key = key
        self.operation = operation
