"""
Storage Services Package

Provides the abstract shared-blob interface, its file and in-memory
implementations, and the repository that maps the ledger onto a blob.
"""

from ecusson.services.storage.interface import (
    BlobStoreInterface,
    CorruptBlobError,
    StorageError,
    StorageUnavailableError,
)
from ecusson.services.storage.file_store import FileBlobStore
from ecusson.services.storage.memory_store import InMemoryBlobStore
from ecusson.services.storage.ledger_repository import (
    SharedLedgerRepository,
    decode_blob,
    encode_blob,
)

__all__ = [
    # Interface
    "BlobStoreInterface",
    # Exceptions
    "CorruptBlobError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "FileBlobStore",
    "InMemoryBlobStore",
    # Ledger mapping
    "SharedLedgerRepository",
    "decode_blob",
    "encode_blob",
]
