"""
History Import/Export Codec

The exported history is plain text, one line per day:

    2024-01-01,5
    2024-01-02,-2

No header, no quoting, no escaping. The file is called `history.md` by
default even though it is not markdown.

DESIGN DECISION: Import is lenient, line by line.
A line is kept only if it has exactly two comma-separated fields, the
first being a `YYYY-MM-DD` date and the second a decimal integer.
Anything else is dropped without comment; the user only learns whether
the import as a whole succeeded.

Merge policy: imported days overwrite existing ones (import wins);
days absent from the file are left untouched.
"""

import re
from datetime import date
from os import PathLike
from pathlib import Path
from typing import Mapping, Optional, Union
from uuid import UUID

from ecusson.audit import AuditLogger
from ecusson.ledger.store import LedgerStore
from ecusson.models.audit import AuditEventBuilder
from ecusson.models.ledger import LedgerSnapshot


_DAY_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_AMOUNT_PATTERN = re.compile(r"[+-]?[0-9]+")


class HistoryTransferError(Exception):
    """Base exception for history import/export."""
    pass


class HistoryFileError(HistoryTransferError):
    """The history file could not be read or written."""
    pass


class EmptyHistoryError(HistoryTransferError):
    """There is nothing to export."""
    pass


def encode_history(totals: Union[LedgerSnapshot, Mapping[date, int]]) -> str:
    """Render day totals as `day,amount` lines in ascending day order."""
    if isinstance(totals, LedgerSnapshot):
        totals = totals.totals
    return "".join(f"{day.isoformat()},{amount}\n" for day, amount in sorted(totals.items()))


def parse_history_line(line: str) -> Optional[tuple[date, int]]:
    """Parse one line; None if it does not match the grammar."""
    trimmed = line.strip()
    if not trimmed:
        return None
    parts = trimmed.split(",")
    if len(parts) != 2:
        return None

    day_text, amount_text = parts
    if not _AMOUNT_PATTERN.fullmatch(amount_text):
        return None
    if not _DAY_PATTERN.fullmatch(day_text):
        return None
    try:
        day = date.fromisoformat(day_text)
    except ValueError:
        return None
    return day, int(amount_text)


def decode_history(text: str) -> dict[date, int]:
    """
    Parse exported history text.

    Later lines for the same day win.
    """
    imported: dict[date, int] = {}
    for line in text.splitlines():
        parsed = parse_history_line(line)
        if parsed is not None:
            day, amount = parsed
            imported[day] = amount
    return imported


class HistoryTransfer:
    """
    Moves the ledger history in and out of user-selected files.
    """

    def __init__(
        self,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger

    def export_text(self, correlation_id: Optional[UUID] = None) -> str:
        """
        Render the current ledger as history text.

        Raises:
            EmptyHistoryError: If the ledger has no recorded day
        """
        snapshot = self._export_snapshot()
        self._audit(AuditEventBuilder.history_exported(
            day_count=len(snapshot.totals), correlation_id=correlation_id,
        ))
        return encode_history(snapshot)

    def export_to(
        self,
        path: Union[str, PathLike],
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Write the history file.

        Returns:
            Number of exported days

        Raises:
            EmptyHistoryError: If the ledger has no recorded day
            HistoryFileError: If the file could not be written
        """
        snapshot = self._export_snapshot()
        target = Path(path)
        try:
            with target.open("w", encoding="utf-8", newline="") as handle:
                handle.write(encode_history(snapshot))
        except OSError as e:
            self._audit(AuditEventBuilder.transfer_failed("export", str(e), correlation_id))
            raise HistoryFileError(f"Export failed: {e.strerror or e}") from e

        self._audit(AuditEventBuilder.history_exported(
            day_count=len(snapshot.totals),
            correlation_id=correlation_id,
            destination=str(target),
        ))
        return len(snapshot.totals)

    def import_text(
        self,
        text: str,
        correlation_id: Optional[UUID] = None,
        source: Optional[str] = None,
    ) -> int:
        """
        Merge history text into the ledger.

        Returns:
            Number of imported days (0 if no line matched)

        Raises:
            StorageError: If the merged ledger could not be committed
        """
        imported = decode_history(text)
        count = self._store.merge_import(imported, correlation_id=correlation_id)
        self._audit(AuditEventBuilder.history_imported(
            day_count=count, correlation_id=correlation_id, source=source,
        ))
        return count

    def import_bytes(
        self,
        data: bytes,
        correlation_id: Optional[UUID] = None,
        source: Optional[str] = None,
    ) -> int:
        """Merge raw file content; invalid UTF-8 sequences are replaced."""
        return self.import_text(
            data.decode("utf-8", errors="replace"),
            correlation_id=correlation_id,
            source=source,
        )

    def import_from(
        self,
        path: Union[str, PathLike],
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Read a history file and merge it into the ledger.

        Raises:
            HistoryFileError: If the file could not be read
            StorageError: If the merged ledger could not be committed
        """
        source = Path(path)
        try:
            with source.open("rb") as handle:
                data = handle.read()
        except OSError as e:
            self._audit(AuditEventBuilder.transfer_failed("import", str(e), correlation_id))
            raise HistoryFileError(f"Import error: {e.strerror or e}") from e

        return self.import_bytes(data, correlation_id=correlation_id, source=str(source))

    def _export_snapshot(self) -> LedgerSnapshot:
        snapshot = self._store.snapshot()
        if snapshot.is_empty:
            raise EmptyHistoryError("No history data to export.")
        return snapshot

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)
