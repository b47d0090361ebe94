"""Device transport interface used by the pruning pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence


class DeviceTransport(ABC):
    """Blocking remote file operations on one attached device."""

    @abstractmethod
    def list_files(self, root: str, extensions: Sequence[str]) -> Iterator[str]:
        """Raw ``<mtime> <path>`` lines for media files directly inside root.

        Raises ListingFailedError when the listing cannot be produced.
        """

    @abstractmethod
    def file_size(self, path: str) -> int:
        """Size in bytes. Raises DeviceCommandError on failure."""

    @abstractmethod
    def delete_file(self, path: str) -> bool:
        """Remove one file. Returns False if the device refused."""

    @abstractmethod
    def path_exists(self, root: str) -> bool:
        """True when root is a directory on the device."""
