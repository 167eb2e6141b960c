"""
Failures reported to the host build tool.

Callers only ever see this small set of errors. The underlying boto3/botocore
exception is always chained as __cause__ and logged where it is translated.
"""

from typing import Optional


class WagonError(Exception):
    """Base class for all wagon failures."""
    pass


class AuthenticationError(WagonError):
    """Raised when connecting fails: bad credentials or no usable region."""
    pass


class ResourceDoesNotExistError(WagonError):
    """Raised when a requested artifact is absent from the repository."""

    def __init__(self, message: str, resource: Optional[str] = None) -> None:
        super().__init__(message)
        self.resource = resource


class TransferFailedError(WagonError):
    """Raised when an upload or download fails part way."""

    def __init__(self, message: str, resource: Optional[str] = None) -> None:
        super().__init__(message)
        self.resource = resource


class NotConnectedError(RuntimeError):
    """Raised when a data operation is issued before connect() or after disconnect()."""
    pass
