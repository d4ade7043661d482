"""Ledger package: aggregation engine and ledger store."""

from ecusson.ledger.aggregation import (
    daily_series,
    day_of_year,
    local_day,
    sum_day,
    sum_trailing,
    sum_year_to_date,
    summarize,
)
from ecusson.ledger.store import LedgerStore

__all__ = [
    "LedgerStore",
    "daily_series",
    "day_of_year",
    "local_day",
    "sum_day",
    "sum_trailing",
    "sum_year_to_date",
    "summarize",
]
