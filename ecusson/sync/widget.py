"""
Widget Process Side

The widget runs in its own process. It never shares memory with the app:
it reads the shared ledger blob and runs the same aggregation engine.

A widget only re-reads the ledger when the host asks it to, i.e. when the
refresh signal generation moved or the day rolled over. Until then it keeps
showing the entry it rendered last, which may be stale. That is expected:
propagation between processes is eventually consistent with no bound.
"""

from datetime import datetime, timedelta, tzinfo
from typing import TYPE_CHECKING, Callable, Optional

from ecusson.ledger.aggregation import summarize
from ecusson.models.platform import WidgetEntry
from ecusson.services.platform import SharedSignalWidgetHost
from ecusson.services.storage import SharedLedgerRepository, StorageError

if TYPE_CHECKING:
    from ecusson.ledger.store import LedgerStore


def _local_now() -> datetime:
    return datetime.now().astimezone()


class WidgetTimeline:
    """
    Timeline provider of the home screen widget.
    """

    def __init__(
        self,
        repository: SharedLedgerRepository,
        signal_source: SharedSignalWidgetHost,
        clock: Callable[[], datetime] = _local_now,
        tz: Optional[tzinfo] = None,
        trailing_days: int = 28,
    ):
        self._repository = repository
        self._signal_source = signal_source
        self._clock = clock
        self._tz = tz
        self._trailing_days = trailing_days
        self._current: Optional[WidgetEntry] = None
        self._next_refresh: Optional[datetime] = None

    @property
    def current(self) -> Optional[WidgetEntry]:
        """The entry rendered last, possibly stale."""
        return self._current

    def render(self, now: Optional[datetime] = None) -> WidgetEntry:
        """Read the shared ledger and build a fresh entry."""
        now = now or self._clock()
        generation = self._signal_generation()
        snapshot = self._repository.load().snapshot()
        entry = WidgetEntry(
            rendered_at=now,
            summary=summarize(snapshot, now, self._trailing_days, self._tz),
            generation=generation,
        )
        self._current = entry
        self._next_refresh = self.next_refresh(now)
        return entry

    def poll(self, now: Optional[datetime] = None) -> Optional[WidgetEntry]:
        """
        Re-render if the host signalled a refresh or the day rolled over.

        Returns:
            The new entry, or None when the current one is kept
        """
        now = now or self._clock()
        if self._current is None:
            return self.render(now)
        if self._signal_generation() != self._current.generation:
            return self.render(now)
        if self._next_refresh is not None and self._compare_key(now) >= self._compare_key(self._next_refresh):
            return self.render(now)
        return None

    def next_refresh(self, now: Optional[datetime] = None) -> datetime:
        """Next scheduled reload: one minute past the following midnight."""
        now = now or self._clock()
        local = now.astimezone(self._tz) if now.tzinfo is not None else now
        candidate = local.replace(hour=0, minute=1, second=0, microsecond=0)
        if candidate <= local:
            candidate = (local + timedelta(days=1)).replace(hour=0, minute=1, second=0, microsecond=0)
        return candidate

    def _compare_key(self, instant: datetime) -> datetime:
        # Naive and aware instants cannot be compared; drop the zone after
        # moving to the device calendar.
        if instant.tzinfo is not None:
            return instant.astimezone(self._tz).replace(tzinfo=None)
        return instant

    def _signal_generation(self) -> int:
        try:
            return self._signal_source.current_signal().generation
        except StorageError:
            return self._current.generation if self._current else 0


class WidgetControl:
    """
    Interactive widget buttons.

    The widget process mutates the ledger through its own LedgerStore,
    like any other writer.
    """

    def __init__(self, store: "LedgerStore"):
        self._store = store

    def add_one(self) -> int:
        return self._store.apply(1)

    def remove_one(self) -> int:
        return self._store.apply(-1)
