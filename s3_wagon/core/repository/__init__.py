"""
Repository access for the wagon.

Contains the value types, error taxonomy, key resolution, progress
reporting, and the host-facing wagon facade.
"""

from .errors import (
    AuthenticationError,
    NotConnectedError,
    ResourceDoesNotExistError,
    TransferFailedError,
    WagonError,
)
from .models import AuthenticationInfo, RepositoryLocation
from .resolver import KeyResolver
from .transfer import (
    CumulativeTransferProgress,
    ProgressFileReader,
    ProgressFileWriter,
    TransferListener,
    TransferProgress,
)
from .wagon import StorageRepository, StorageWagon

__all__ = [
    "AuthenticationError",
    "AuthenticationInfo",
    "CumulativeTransferProgress",
    "KeyResolver",
    "NotConnectedError",
    "ProgressFileReader",
    "ProgressFileWriter",
    "RepositoryLocation",
    "ResourceDoesNotExistError",
    "StorageRepository",
    "StorageWagon",
    "TransferFailedError",
    "TransferListener",
    "TransferProgress",
    "WagonError",
]
