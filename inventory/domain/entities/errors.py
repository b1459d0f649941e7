"""
Domain Errors

Error taxonomy of the inventory engine. Every error carries a human readable
message and a ``details`` dict with the logical resource it refers to.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidAttributeError(DomainError):
    """Raised when a submitted attribute cannot be stored (e.g. missing name)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidQueryError(DomainError):
    """Raised when a query uses an unsupported operator or invalid paging."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class DeviceNotFoundError(DomainError):
    """Raised when a single-target operation affected no device."""

    def __init__(self, device_id: str, details: Optional[Dict[str, Any]] = None):
        message = f"Device with ID {device_id} not found"
        super().__init__(message, {"device_id": device_id, **(details or {})})


class GroupNotFoundError(DomainError):
    """Raised when no device currently carries the requested group."""

    def __init__(self, group: str, details: Optional[Dict[str, Any]] = None):
        message = f"Group {group} not found"
        super().__init__(message, {"group": group, **(details or {})})


class StorageError(DomainError):
    """Raised when the backing store fails or returns undecodable data."""

    def __init__(
        self,
        operation: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation = operation
        message = f"Storage operation '{operation}' failed: {reason}"
        super().__init__(message, {"operation": operation, **(details or {})})


class OperationTimeoutError(StorageError):
    """Raised when the store gave up on an operation because of its deadline."""
