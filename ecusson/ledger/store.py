"""
Ledger Store

The single entry point for mutating the spend ledger.

DESIGN DECISION: The store keeps no authoritative in-memory copy.
Every mutation re-reads the shared blob, appends to it and commits the
whole blob atomically through the sync bridge. A reader in the same
process therefore always observes its own writes, and a store in the
widget process builds on what the app process committed last.

GUARANTEES:
- Either the whole updated blob is committed or the previous one remains
- A ledger that could not be read because storage is unavailable is never
  overwritten
- Entries are only ever appended
"""

from datetime import date, datetime, tzinfo
from typing import Callable, Mapping, Optional
from uuid import UUID

from ecusson.audit import AuditLogger
from ecusson.ledger.aggregation import local_day
from ecusson.models.audit import AuditEventBuilder
from ecusson.models.ledger import EntryKind, LedgerSnapshot, SpendEntry
from ecusson.sync.bridge import SyncBridge


def _local_now() -> datetime:
    return datetime.now().astimezone()


class LedgerStore:
    """
    Owner of the persisted spend ledger.
    """

    def __init__(
        self,
        bridge: SyncBridge,
        clock: Callable[[], datetime] = _local_now,
        tz: Optional[tzinfo] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the store.

        Args:
            bridge: Sync bridge that persists and propagates commits
            clock: Source of the current instant
            tz: Device timezone; None means the system local timezone
            audit_logger: Audit logger for ledger events
        """
        self._bridge = bridge
        self._clock = clock
        self._tz = tz
        self._audit_logger = audit_logger

    @property
    def tz(self) -> Optional[tzinfo]:
        return self._tz

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return local_day(self._clock(), self._tz)

    def apply(
        self,
        delta: int,
        at: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Record a spend delta.

        Args:
            delta: Positive for an expense, negative for a correction
            at: Instant of the action; defaults to now
            correlation_id: Correlates the audit events of this action

        Returns:
            The new total for the day of `at`

        Raises:
            StorageError: If the ledger could not be read or committed
        """
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise TypeError(f"delta must be an integer, got {type(delta).__name__}")

        at = at or self._clock()
        day = local_day(at, self._tz)

        blob = self._bridge.read_blob(strict=True)
        entry = SpendEntry(kind=EntryKind.ADJUST, day=day, amount=delta, recorded_at=at)
        updated = blob.appended([entry])
        snapshot = updated.snapshot()
        new_total = snapshot.get(day)

        self._bridge.publish(
            updated,
            today_total=snapshot.get(self.today()),
            correlation_id=correlation_id,
        )

        self._audit(AuditEventBuilder.ledger_adjusted(
            entry_id=entry.entry_id,
            day=day,
            delta=delta,
            new_total=new_total,
            correlation_id=correlation_id,
        ))
        return new_total

    def merge_import(
        self,
        totals: Mapping[date, int],
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Merge imported day totals into the ledger.

        Imported days overwrite existing ones; other days are untouched.
        Nothing is written for an empty import.

        Returns:
            Number of imported days

        Raises:
            StorageError: If the ledger could not be read or committed
        """
        if not totals:
            return 0

        recorded_at = self._clock()
        blob = self._bridge.read_blob(strict=True)
        updated = blob.appended(
            SpendEntry(kind=EntryKind.SET, day=day, amount=amount, recorded_at=recorded_at)
            for day, amount in sorted(totals.items())
        )
        self._bridge.publish(
            updated,
            today_total=updated.snapshot().get(self.today()),
            correlation_id=correlation_id,
        )
        return len(totals)

    def snapshot(self) -> LedgerSnapshot:
        """Current snapshot; empty if the shared blob is unreadable."""
        return self._bridge.read_snapshot()

    def entries(self) -> list[SpendEntry]:
        """All ledger entries in append order."""
        return list(self._bridge.read_blob().entries)

    def total_for(self, day: date) -> int:
        return self.snapshot().get(day)

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)
