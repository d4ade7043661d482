"""
Abstract Storage Interface

DESIGN DECISION: The "shared global state" of the ledger is an explicit
key-value interface, not an in-memory global.
This allows us to:
1. Share one ledger between the app, widget and live activity processes
2. Use in-memory storage for testing
3. Swap the file-backed store for another host container later
4. Keep ledger logic decoupled from where the bytes live

The interface is intentionally tiny: read, atomic write, delete.
No process may assume another process's cached copy is current.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BlobStoreInterface(ABC):
    """
    Abstract interface for the process-shared persisted blob region.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[bytes]:
        """
        Read the blob stored under `key`.

        Args:
            key: Fixed identifier within the app group

        Returns:
            The stored bytes, or None if nothing was ever written

        Raises:
            StorageUnavailableError: If the region cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """
        Replace the blob stored under `key`.

        The write is atomic: concurrent readers observe either the previous
        blob or the new one, never a partial write.

        Raises:
            StorageUnavailableError: If the region cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove the blob stored under `key`.

        Returns:
            True if a blob was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The shared storage region could not be accessed."""
    pass


class CorruptBlobError(StorageError):
    """A stored blob could not be decoded."""
    pass
