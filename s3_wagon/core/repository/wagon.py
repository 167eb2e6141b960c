"""
Host-facing wagon facade.

The host build tool talks to a StorageWagon: get, get_if_newer, put,
put_directory, resource_exists and get_file_list. The wagon turns those into
calls on a StorageRepository, wires progress through to the host's
listeners, and makes sure only the errors in .errors escape.

It doesn't know about boto3. The S3 implementation of StorageRepository
lives in s3_wagon.infrastructure.storage.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from .errors import (
    NotConnectedError,
    ResourceDoesNotExistError,
    TransferFailedError,
    WagonError,
)
from .models import AuthenticationInfo
from .resolver import KeyResolver
from .transfer import CumulativeTransferProgress, PathLike, TransferListener, TransferProgress

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class StorageRepository(Protocol):
    """
    Interface for a connected view of one bucket and base directory.

    Relative paths are resolved against base_directory by the repository.
    """

    bucket: str
    base_directory: str

    def connect(
        self,
        authentication_info: Optional[AuthenticationInfo] = None,
        region: Optional[str] = None,
    ) -> None:
        ...

    def copy(self, resource_name: str, destination: PathLike, progress: TransferProgress) -> None:
        ...

    def put(self, file: PathLike, destination: str, progress: TransferProgress) -> None:
        ...

    def exists(self, resource_name: str) -> bool:
        ...

    def new_resource_available(self, resource_name: str, timestamp: int) -> bool:
        ...

    def list(self, path: str) -> list[str]:
        ...

    def disconnect(self) -> None:
        ...


# ---------------------------------------------------------------------------
# Wagon
# ---------------------------------------------------------------------------

class StorageWagon:
    """
    Artifact transport over a StorageRepository.

    One wagon serves one configured repository for the length of a build
    session: connect once, transfer any number of artifacts, disconnect.
    """

    def __init__(
        self,
        repository: StorageRepository,
        listeners: Optional[list[TransferListener]] = None,
    ) -> None:
        self._repository = repository
        self._listeners: list[TransferListener] = list(listeners or [])
        self._resolver = KeyResolver()

    @property
    def repository(self) -> StorageRepository:
        return self._repository

    def connect(
        self,
        authentication_info: Optional[AuthenticationInfo] = None,
        region: Optional[str] = None,
    ) -> None:
        self._repository.connect(authentication_info, region)

    def disconnect(self) -> None:
        self._repository.disconnect()

    def get(self, resource_name: str, destination: PathLike) -> None:
        """Download resource_name into the destination file."""
        progress = CumulativeTransferProgress(resource_name, self._listeners)
        self._repository.copy(resource_name, destination, progress)

        logger.debug(
            "Downloaded resource",
            extra={"resource": resource_name, "size_bytes": progress.transferred},
        )

    def get_if_newer(self, resource_name: str, destination: PathLike, timestamp: int) -> bool:
        """
        Download resource_name only if it changed after timestamp.

        Args:
            timestamp: Milliseconds since the epoch, usually the local copy's mtime.

        Returns:
            True if the resource was downloaded.
        """
        if not self._repository.new_resource_available(resource_name, timestamp):
            return False
        self.get(resource_name, destination)
        return True

    def put(self, source: PathLike, destination: str) -> None:
        """Upload the source file as destination."""
        progress = CumulativeTransferProgress(destination, self._listeners)
        self._repository.put(source, destination, progress)

        logger.debug(
            "Uploaded resource",
            extra={"resource": destination, "size_bytes": progress.transferred},
        )

    def put_directory(self, source_directory: PathLike, destination_directory: str) -> None:
        """
        Upload every file below source_directory.

        Files keep their path relative to source_directory, under
        destination_directory. Upload order is sorted so a failure part way
        is reproducible.
        """
        source = Path(source_directory)
        if not source.is_dir():
            raise TransferFailedError(
                f"Source is not a directory: {source}", resource=str(source)
            )

        for path in sorted(p for p in source.rglob("*") if p.is_file()):
            relative = path.relative_to(source).as_posix()
            self.put(path, self._resolver.resolve(destination_directory, relative))

    def resource_exists(self, resource_name: str) -> bool:
        try:
            return self._repository.exists(resource_name)
        except (WagonError, NotConnectedError):
            raise
        except Exception as e:
            logger.error(
                "Could not check resource",
                extra={"resource": resource_name, "error": str(e)},
                exc_info=True,
            )
            raise TransferFailedError(
                f"Could not check if resource {resource_name} exists", resource=resource_name
            ) from e

    def get_file_list(self, destination_directory: str) -> list[str]:
        """
        List the direct children of destination_directory.

        Files are returned by name, sub-directories by name with a trailing
        slash, each once, in the order the store returned them.
        """
        try:
            keys = self._repository.list(destination_directory)
        except (WagonError, NotConnectedError):
            raise
        except Exception as e:
            logger.error(
                "Could not list directory",
                extra={"directory": destination_directory, "error": str(e)},
                exc_info=True,
            )
            raise TransferFailedError(
                f"Could not list {destination_directory}", resource=destination_directory
            ) from e

        prefix = self._resolver.resolve(self._repository.base_directory, destination_directory)
        entries = self._direct_children(keys, prefix)
        if not entries:
            raise ResourceDoesNotExistError(
                f"Could not find any files under {destination_directory}",
                resource=destination_directory,
            )
        return entries

    def supports_directory_copy(self) -> bool:
        return True

    @staticmethod
    def _direct_children(keys: list[str], prefix: str) -> list[str]:
        """Reduce full keys below prefix to unique first-level entries."""
        directory = f"{prefix}{KeyResolver.SEPARATOR}" if prefix else ""
        entries: list[str] = []
        seen: set[str] = set()

        for key in keys:
            if not key.startswith(directory):
                continue
            relative = key[len(directory):]
            if not relative:
                continue
            head, separator, _ = relative.partition(KeyResolver.SEPARATOR)
            entry = head + separator
            if entry not in seen:
                seen.add(entry)
                entries.append(entry)

        return entries
