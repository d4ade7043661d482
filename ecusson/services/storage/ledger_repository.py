"""
Shared Ledger Repository

Encodes the ledger log to the shared blob and decodes it back.

DESIGN DECISION: Readers never fail to render.
An unreadable, missing or corrupt blob is treated as an empty ledger and
audited; the error is never surfaced to the user. Writers are stricter: a
ledger that cannot be read because the storage is unavailable is not
overwritten.

Older installs stored the day -> total map itself. Such a blob is read as
one SET entry per day, so it migrates the first time the ledger is written.
"""

import json
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ecusson.audit import AuditLogger
from ecusson.models.audit import AuditEventBuilder
from ecusson.models.ledger import EntryKind, LedgerBlob, SpendEntry
from ecusson.services.storage.interface import (
    BlobStoreInterface,
    CorruptBlobError,
    StorageError,
)


_LEGACY_MAP = TypeAdapter(dict[date, int])


def encode_blob(blob: LedgerBlob) -> bytes:
    """Serialize a ledger blob to UTF-8 JSON."""
    return blob.model_dump_json().encode("utf-8")


def decode_blob(data: bytes) -> LedgerBlob:
    """
    Deserialize a ledger blob.

    Accepts the current event-log layout and the legacy day -> total map.

    Raises:
        CorruptBlobError: If the bytes match neither layout
    """
    try:
        payload = json.loads(data)
    except ValueError as e:
        raise CorruptBlobError(f"Ledger blob is not valid JSON: {e}") from e

    if isinstance(payload, dict) and "entries" in payload:
        try:
            return LedgerBlob.model_validate(payload)
        except ValidationError as e:
            raise CorruptBlobError(f"Ledger blob has an invalid layout: {e}") from e

    try:
        legacy = _LEGACY_MAP.validate_python(payload)
    except ValidationError as e:
        raise CorruptBlobError(f"Ledger blob has an invalid layout: {e}") from e

    migrated_at = datetime.now(timezone.utc)
    return LedgerBlob(
        entries=[
            SpendEntry(kind=EntryKind.SET, day=day, amount=amount, recorded_at=migrated_at)
            for day, amount in sorted(legacy.items())
        ]
    )


class SharedLedgerRepository:
    """
    Read/write contract for the ledger blob in the shared app group.
    """

    def __init__(
        self,
        blob_store: BlobStoreInterface,
        key: str = "history",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = blob_store
        self._key = key
        self._audit_logger = audit_logger

    @property
    def key(self) -> str:
        return self._key

    def load(self, strict: bool = False) -> LedgerBlob:
        """
        Load the current ledger blob.

        Args:
            strict: Raise StorageError when the storage itself is
                    unavailable instead of returning an empty ledger.
                    Writers use this so they never replace a ledger they
                    could not read.

        Returns:
            The decoded blob; an empty one if missing or corrupt.
        """
        try:
            data = self._store.read(self._key)
        except StorageError as e:
            self._audit(AuditEventBuilder.snapshot_unreadable(self._key, str(e)))
            if strict:
                raise
            return LedgerBlob()

        if data is None:
            return LedgerBlob()

        try:
            return decode_blob(data)
        except CorruptBlobError as e:
            self._audit(AuditEventBuilder.snapshot_unreadable(self._key, str(e)))
            if strict:
                self._preserve_corrupt(data)
            return LedgerBlob()

    def save(self, blob: LedgerBlob) -> None:
        """
        Commit the whole blob atomically.

        Raises:
            StorageError: If the commit fails; the previous blob is kept
        """
        try:
            self._store.write(self._key, encode_blob(blob))
        except StorageError as e:
            self._audit(AuditEventBuilder.snapshot_save_failed(self._key, str(e)))
            raise

    def _preserve_corrupt(self, data: bytes) -> None:
        """Keep a copy of an undecodable blob before it gets replaced."""
        try:
            self._store.write(f"{self._key}-corrupt", data)
        except StorageError as e:
            self._audit(AuditEventBuilder.system_error(
                error_type="corrupt_blob_backup_failed",
                error_message=str(e),
                details={"key": self._key},
            ))

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)
