"""
Error kinds raised by the sitewide alert service layer.
"""


class SitewideAlertError(Exception):
    """Base exception for sitewide alert operations."""
    pass


class InvalidArgument(SitewideAlertError, ValueError):
    """Raised when an argument or option is invalid, or there is nothing to act on."""
    pass


class StorageError(SitewideAlertError):
    """Raised when the storage backend fails to read or write alerts."""

    def __init__(self, operation: str, error: Exception):
        self.operation = operation
        self.error = error
        super().__init__(f"Storage failure during '{operation}': {error}")
