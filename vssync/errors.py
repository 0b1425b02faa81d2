# VSSYNC Errors
# Exception hierarchy for fatal and per-item failures

from typing import Optional


class VssyncError(Exception):
    """Base exception for all vssync errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(VssyncError):
    """Raised when the run cannot be configured (missing key, token, ...)."""


class RemoteError(VssyncError):
    """
    Exception raised for a single failed remote call.

    Per-item remote failures are caught by the executor and recorded;
    fatal callers wrap them into SnapshotError or IndexResolutionError.
    """

    def __init__(self, message: str, operation: str = "", status_code: Optional[int] = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)


class SnapshotError(VssyncError):
    """Raised when a complete remote snapshot cannot be read."""


class IndexResolutionError(VssyncError):
    """Raised when the namespace index can be neither found nor created."""
