"""
Main Orchestrator for Ecusson

This module ties together all the components and defines the flows of
each process:
1. App (add/subtract → commit → recompute → signal; import/export)
2. Widget (read shared ledger on refresh; interactive +1/-1 buttons)

DESIGN DECISION: The orchestrator is the only place that knows about
concrete storage and host adapters. Everything below it receives narrow
interfaces, so tests can swap the shared app group for an in-memory one.
"""

from datetime import date, datetime, timedelta
from os import PathLike
from typing import Callable, Optional, Union

from ecusson.audit import AuditLogger, configure_logging, create_correlation_id
from ecusson.codec import HistoryTransfer
from ecusson.config import Settings, get_settings
from ecusson.ledger import LedgerStore, daily_series, local_day, summarize
from ecusson.models.ledger import SpendSummary
from ecusson.services.platform import (
    ReminderScheduler,
    SharedLiveActivityChannel,
    SharedNotificationCenter,
    SharedSignalWidgetHost,
)
from ecusson.services.storage import (
    BlobStoreInterface,
    FileBlobStore,
    SharedLedgerRepository,
)
from ecusson.sync import SyncBridge, WidgetControl, WidgetTimeline


def _local_now() -> datetime:
    return datetime.now().astimezone()


class SpendTracker:
    """
    The app process flow.

    Every user action gets its own correlation ID so the ledger, bridge
    and transfer events it causes can be traced together.
    """

    def __init__(
        self,
        store: LedgerStore,
        transfer: HistoryTransfer,
        reminders: Optional[ReminderScheduler] = None,
        trailing_days: int = 28,
    ):
        self._store = store
        self._transfer = transfer
        self._reminders = reminders
        self._trailing_days = trailing_days

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def transfer(self) -> HistoryTransfer:
        return self._transfer

    def launch(self) -> SpendSummary:
        """Register the daily reminder if needed and load the totals."""
        if self._reminders:
            self._reminders.ensure_daily()
        return self.summary()

    def add_amount(self, delta: int) -> int:
        """
        Record `delta` for today.

        Returns:
            Today's new total

        Raises:
            StorageError: If the ledger could not be committed
        """
        return self._store.apply(delta, correlation_id=create_correlation_id())

    def summary(self, now: Optional[datetime] = None) -> SpendSummary:
        now = now or self._store.now()
        return summarize(self._store.snapshot(), now, self._trailing_days, self._store.tz)

    def history(self, days: int = 28, now: Optional[datetime] = None) -> list[tuple[date, int]]:
        """Per-day totals for the last `days` days, oldest first."""
        if days < 1:
            return []
        today = local_day(now or self._store.now(), self._store.tz)
        return daily_series(self._store.snapshot(), today - timedelta(days=days - 1), today)

    def export_text(self) -> str:
        return self._transfer.export_text(correlation_id=create_correlation_id())

    def export_to(self, path: Union[str, PathLike]) -> int:
        return self._transfer.export_to(path, correlation_id=create_correlation_id())

    def import_text(self, text: str) -> int:
        return self._transfer.import_text(text, correlation_id=create_correlation_id())

    def import_bytes(self, data: bytes, source: Optional[str] = None) -> int:
        return self._transfer.import_bytes(
            data, correlation_id=create_correlation_id(), source=source,
        )

    def import_from(self, path: Union[str, PathLike]) -> int:
        return self._transfer.import_from(path, correlation_id=create_correlation_id())


def _build_blob_store(settings: Settings, blob_store: Optional[BlobStoreInterface]) -> BlobStoreInterface:
    if blob_store is not None:
        return blob_store
    return FileBlobStore(settings.storage.group_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    blob_store: Optional[BlobStoreInterface] = None,
    clock: Callable[[], datetime] = _local_now,
    live_activity_enabled: bool = True,
    notifications_authorized: bool = True,
) -> SpendTracker:
    """
    Factory function to create the app process components.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        blob_store: Shared app group store. Defaults to the file store under
                    the configured shared directory.
        clock: Source of the current instant
        live_activity_enabled: False behaves like a device without live activities
        notifications_authorized: False behaves like denied notifications

    Returns:
        The app flow object
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    ledger_settings = settings.ledger
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger()
    shared = _build_blob_store(settings, blob_store)

    repository = SharedLedgerRepository(
        shared,
        key=storage_settings.history_key,
        audit_logger=audit_logger,
    )
    bridge = SyncBridge(
        repository,
        widget_host=SharedSignalWidgetHost(shared, key=storage_settings.widget_signal_key, clock=clock),
        live_activity=SharedLiveActivityChannel(
            shared,
            key=storage_settings.live_activity_key,
            enabled=live_activity_enabled,
            clock=clock,
        ),
        widget_kind=ledger_settings.widget_kind,
        audit_logger=audit_logger,
    )
    store = LedgerStore(bridge, clock=clock, tz=ledger_settings.tzinfo, audit_logger=audit_logger)
    transfer = HistoryTransfer(store, audit_logger=audit_logger)
    reminders = ReminderScheduler(
        SharedNotificationCenter(
            shared,
            key=storage_settings.notifications_key,
            authorized=notifications_authorized,
        ),
        settings=settings.reminder,
        audit_logger=audit_logger,
    )

    return SpendTracker(
        store,
        transfer,
        reminders=reminders,
        trailing_days=ledger_settings.trailing_days,
    )


def create_widget_components(
    settings: Optional[Settings] = None,
    blob_store: Optional[BlobStoreInterface] = None,
    clock: Callable[[], datetime] = _local_now,
) -> tuple[WidgetTimeline, WidgetControl]:
    """
    Factory function to create the widget process components.

    The interactive buttons reload every widget kind after a change.

    Returns:
        (timeline, control)
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    ledger_settings = settings.ledger
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger()
    shared = _build_blob_store(settings, blob_store)

    repository = SharedLedgerRepository(
        shared,
        key=storage_settings.history_key,
        audit_logger=audit_logger,
    )
    signal_host = SharedSignalWidgetHost(shared, key=storage_settings.widget_signal_key, clock=clock)

    timeline = WidgetTimeline(
        repository,
        signal_host,
        clock=clock,
        tz=ledger_settings.tzinfo,
        trailing_days=ledger_settings.trailing_days,
    )
    bridge = SyncBridge(
        repository,
        widget_host=signal_host,
        widget_kind=None,
        audit_logger=audit_logger,
    )
    control = WidgetControl(
        LedgerStore(bridge, clock=clock, tz=ledger_settings.tzinfo, audit_logger=audit_logger)
    )
    return timeline, control
