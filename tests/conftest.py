"""
Shared fixtures.

All processes of one install are simulated by components sharing a single
InMemoryBlobStore. Time is pinned to a fixed Europe/Paris clock so day
boundaries do not depend on the machine running the tests.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from ecusson.audit import AuditLogger
from ecusson.ledger import LedgerStore
from ecusson.services.platform import SharedLiveActivityChannel, SharedSignalWidgetHost
from ecusson.services.storage import InMemoryBlobStore, SharedLedgerRepository
from ecusson.sync import SyncBridge


PARIS = ZoneInfo("Europe/Paris")


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 10, 12, 0, tzinfo=PARIS))


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def repository(blob_store, audit_logger):
    return SharedLedgerRepository(blob_store, key="history", audit_logger=audit_logger)


@pytest.fixture
def widget_host(blob_store, clock):
    return SharedSignalWidgetHost(blob_store, clock=clock)


@pytest.fixture
def live_activity(blob_store, clock):
    return SharedLiveActivityChannel(blob_store, clock=clock)


@pytest.fixture
def bridge(repository, widget_host, live_activity, audit_logger):
    return SyncBridge(
        repository,
        widget_host=widget_host,
        live_activity=live_activity,
        audit_logger=audit_logger,
    )


@pytest.fixture
def store(bridge, clock, audit_logger):
    return LedgerStore(bridge, clock=clock, tz=PARIS, audit_logger=audit_logger)
