"""In-memory blob store, for tests and single-process use."""

from typing import Optional

from ecusson.services.storage.interface import (
    BlobStoreInterface,
    StorageUnavailableError,
)


class InMemoryBlobStore(BlobStoreInterface):
    """
    Dict-backed blob store.

    Several components sharing one instance behave like several processes
    sharing one app group: they only see each other's data through it.
    Setting `available` to False makes every call fail like an unmounted
    container.
    """

    def __init__(self, available: bool = True):
        self._blobs: dict[str, bytes] = {}
        self.available = available
        self.write_count = 0

    def _check(self, key: str) -> None:
        if not self.available:
            raise StorageUnavailableError(f"Storage unavailable for '{key}'")

    def read(self, key: str) -> Optional[bytes]:
        self._check(key)
        return self._blobs.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._check(key)
        self._blobs[key] = bytes(data)
        self.write_count += 1

    def delete(self, key: str) -> bool:
        self._check(key)
        return self._blobs.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._blobs)
