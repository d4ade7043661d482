"""
Aggregation Engine

DESIGN DECISION: Aggregation is PURE and DETERMINISTIC.
Every figure is computed from a ledger snapshot and a reference instant,
nothing else. The app, the widget and the live activity all call these
same functions on the snapshot they read, so they can only disagree by
reading different snapshots, never by computing differently.

Day boundaries are local calendar days. An aware reference instant is
converted to the device timezone before its day is taken; it is never
normalized to UTC, so a purchase at 00:30 local time lands on the right day.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

from ecusson.models.ledger import LedgerSnapshot, SpendSummary


DateLike = Union[date, datetime]


def local_day(instant: DateLike, tz: Optional[tzinfo] = None) -> date:
    """
    Calendar day of `instant` on the device calendar.

    Args:
        instant: A date (returned as is) or a datetime
        tz: Device timezone; None means the system local timezone.
            Naive datetimes are taken as local wall-clock time.
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is not None:
            return instant.astimezone(tz).date()
        return instant.date()
    return instant


def day_of_year(reference: DateLike, tz: Optional[tzinfo] = None) -> int:
    """1-based ordinal of the reference day within its year."""
    return local_day(reference, tz).timetuple().tm_yday


def sum_day(snapshot: LedgerSnapshot, day: DateLike, tz: Optional[tzinfo] = None) -> int:
    """Total for exactly one calendar day; zero if absent."""
    return snapshot.get(local_day(day, tz))


def _sum_between(snapshot: LedgerSnapshot, start: date, end: date) -> int:
    return sum(amount for day, amount in snapshot.totals.items() if start <= day <= end)


def sum_trailing(
    snapshot: LedgerSnapshot,
    reference: DateLike,
    n: int,
    tz: Optional[tzinfo] = None,
) -> int:
    """
    Sum over the `n` consecutive calendar days ending at the reference day.

    The window is closed: [reference_day - (n - 1), reference_day].
    A window shorter than one day is empty and sums to zero.
    """
    if n < 1:
        return 0
    end = local_day(reference, tz)
    span = n - 1
    if span > (end - date.min).days:
        start = date.min
    else:
        start = end - timedelta(days=span)
    return _sum_between(snapshot, start, end)


def sum_year_to_date(
    snapshot: LedgerSnapshot,
    reference: DateLike,
    tz: Optional[tzinfo] = None,
) -> int:
    """Sum from January 1 of the reference year through the reference day."""
    end = local_day(reference, tz)
    return _sum_between(snapshot, date(end.year, 1, 1), end)


def summarize(
    snapshot: LedgerSnapshot,
    reference: DateLike,
    trailing_days: int = 28,
    tz: Optional[tzinfo] = None,
) -> SpendSummary:
    """
    Compute the figures shown by every surface:
    "Today", "Last N Days" and "Since January 1".
    """
    day = local_day(reference, tz)
    return SpendSummary(
        day=day,
        today=sum_day(snapshot, day),
        trailing=sum_trailing(snapshot, day, trailing_days),
        trailing_days=trailing_days,
        year_to_date=sum_year_to_date(snapshot, day),
    )


def daily_series(
    snapshot: LedgerSnapshot,
    start: DateLike,
    end: DateLike,
    tz: Optional[tzinfo] = None,
) -> list[tuple[date, int]]:
    """
    Per-day totals from `start` to `end` inclusive.

    Days without activity are filled with zero so the series is continuous.
    """
    first = local_day(start, tz)
    last = local_day(end, tz)

    result = []
    current = first
    while current <= last:
        result.append((current, snapshot.get(current)))
        if current == date.max:
            break
        current += timedelta(days=1)
    return result
