"""
Core Ledger Models for Ecusson

These models define the strict schemas for the spend ledger shared by the
app, the widget and the live activity.

DESIGN DECISION: The persisted form is an append-only event log.
Each press of the add/subtract control appends one ADJUST entry; an import
appends one SET entry per imported day. Entries are never mutated or deleted.
Day totals are always recomputed by folding the log into a snapshot.
"""

from datetime import date, datetime
from enum import Enum
from typing import Iterable
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class EntryKind(str, Enum):
    """
    How an entry affects the total of its day.

    ADJUST adds its amount to the running day total.
    SET replaces the running day total (last writer wins).
    """
    ADJUST = "adjust"
    SET = "set"


# =============================================================================
# LOG ENTRIES
# =============================================================================

class SpendEntry(BaseModel):
    """
    A single immutable ledger event.

    `day` is the local calendar day the amount belongs to; it is stored
    explicitly rather than derived from `recorded_at` so that imported
    totals can target any day.
    """
    model_config = ConfigDict(frozen=True)

    entry_id: UUID = Field(
        default_factory=uuid4,
        description="Unique entry identifier"
    )
    kind: EntryKind = Field(
        default=EntryKind.ADJUST,
        description="Whether the amount is a delta or an absolute day total"
    )
    day: date = Field(
        ...,
        description="Local calendar day the amount belongs to"
    )
    amount: int = Field(
        ...,
        description="Signed amount in whole currency units"
    )
    recorded_at: datetime = Field(
        ...,
        description="Instant the entry was appended"
    )


class LedgerBlob(BaseModel):
    """
    The serialized content of the shared persisted blob.
    """

    schema_version: int = Field(
        default=1,
        ge=1,
        description="Version of the blob layout"
    )
    entries: list[SpendEntry] = Field(
        default_factory=list,
        description="Ledger events in append order"
    )

    def appended(self, new_entries: Iterable[SpendEntry]) -> "LedgerBlob":
        """Return a copy of the blob with `new_entries` added at the end."""
        return LedgerBlob(
            schema_version=self.schema_version,
            entries=[*self.entries, *new_entries],
        )

    def snapshot(self) -> "LedgerSnapshot":
        return LedgerSnapshot.from_entries(self.entries)


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    Immutable day -> total view of the ledger at a point in time.

    Absent days are implicitly zero. A day that was touched and netted out
    to zero may be present with a stored zero.
    """
    model_config = ConfigDict(frozen=True)

    totals: dict[date, int] = Field(
        default_factory=dict,
        description="Net spend per local calendar day"
    )
    entry_count: int = Field(
        default=0,
        ge=0,
        description="Number of log entries folded into this snapshot"
    )

    @classmethod
    def from_entries(cls, entries: Iterable[SpendEntry]) -> "LedgerSnapshot":
        """Fold log entries, in order, into per-day totals."""
        totals: dict[date, int] = {}
        count = 0
        for entry in entries:
            count += 1
            if entry.kind == EntryKind.SET:
                totals[entry.day] = entry.amount
            else:
                totals[entry.day] = totals.get(entry.day, 0) + entry.amount
        return cls(totals=totals, entry_count=count)

    @classmethod
    def empty(cls) -> "LedgerSnapshot":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.totals

    def get(self, day: date) -> int:
        """Total for `day`, zero if absent."""
        return self.totals.get(day, 0)

    def days(self) -> list[date]:
        """Recorded days in ascending order."""
        return sorted(self.totals)

    def to_key_map(self) -> dict[str, int]:
        """Day totals keyed by `YYYY-MM-DD` strings."""
        return {day.isoformat(): amount for day, amount in self.totals.items()}


class SpendSummary(BaseModel):
    """
    The three figures every surface renders for a reference day.
    """
    model_config = ConfigDict(frozen=True)

    day: date = Field(
        ...,
        description="Reference day the figures were computed for"
    )
    today: int = Field(
        default=0,
        description="Total for the reference day"
    )
    trailing: int = Field(
        default=0,
        description="Total over the trailing window ending at the reference day"
    )
    trailing_days: int = Field(
        default=28,
        ge=1,
        description="Length of the trailing window"
    )
    year_to_date: int = Field(
        default=0,
        description="Total since January 1 of the reference year"
    )
