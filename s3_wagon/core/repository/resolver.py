"""Mapping of repository-relative paths to storage keys."""

from typing import Optional


class KeyResolver:
    """
    Joins path fragments into a single storage key.

    Backslashes become forward slashes, empty segments are dropped, and the
    result never starts or ends with a separator. An empty base directory
    resolves to the normalized relative path on its own.
    """

    SEPARATOR = "/"

    def resolve(self, *paths: Optional[str]) -> str:
        segments: list[str] = []
        for path in paths:
            if not path:
                continue
            normalized = path.replace("\\", self.SEPARATOR)
            segments.extend(part for part in normalized.split(self.SEPARATOR) if part)
        return self.SEPARATOR.join(segments)
