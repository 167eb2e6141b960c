"""
Transfer progress reporting.

Uploads and downloads go through thin file wrappers that tell a progress
observer how many bytes moved. The observer belongs to the caller; one
observer is used for exactly one copy or put.
"""

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

PathLike = Union[str, Path]

# (resource_name, increment, transferred_so_far)
TransferListener = Callable[[str, int, int], None]


class TransferProgress(Protocol):
    """Receives byte-count increments while a transfer is streaming."""

    def progress(self, increment: int) -> None:
        ...


@dataclass
class CumulativeTransferProgress:
    """
    Progress observer for a single resource.

    Keeps the running total and fans each increment out to listeners,
    which is how the wagon surfaces progress to its host.
    """
    resource_name: str
    listeners: list[TransferListener] = field(default_factory=list)
    transferred: int = 0

    def progress(self, increment: int) -> None:
        if increment <= 0:
            return
        self.transferred += increment
        for listener in self.listeners:
            listener(self.resource_name, increment, self.transferred)


class ProgressFileReader:
    """
    Binary file reader that reports bytes read.

    The SDK may read an upload body once to checksum it and then seek back
    to send it. Only bytes past the furthest position reached so far are
    reported, so the observer's total ends at the file size either way.
    """

    def __init__(self, path: PathLike, progress: TransferProgress) -> None:
        self._file = open(path, "rb")
        self._progress = progress
        self._high_water = 0

    def read(self, size: Optional[int] = -1) -> bytes:
        data = self._file.read(-1 if size is None else size)
        position = self._file.tell()
        if position > self._high_water:
            self._progress.progress(position - self._high_water)
            self._high_water = position
        return data

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._file.seek(offset, whence)

    def tell(self) -> int:
        return self._file.tell()

    def seekable(self) -> bool:
        return True

    def readable(self) -> bool:
        return True

    @property
    def closed(self) -> bool:
        return self._file.closed

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "ProgressFileReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ProgressFileWriter:
    """Binary file writer that reports every byte written."""

    def __init__(self, path: PathLike, progress: TransferProgress) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(target, "wb")
        self._progress = progress

    def write(self, data: bytes) -> int:
        written = self._file.write(data)
        self._progress.progress(written)
        return written

    def writable(self) -> bool:
        return True

    def flush(self) -> None:
        self._file.flush()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "ProgressFileWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
