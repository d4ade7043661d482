"""
Cross-Process Sync Bridge

Makes a ledger change made in one process visible to the widget and live
activity, which run in other processes with no shared memory.

Protocol on every commit:
1. Persist the full ledger blob to the shared app group (atomic)
2. Ask the widget host to re-render (fire-and-forget, may be coalesced)
3. Push today's total to the live activity (host may throttle)

DESIGN DECISION: Only step 1 can fail the caller.
Steps 2 and 3 are best-effort: their failures are audited and absorbed,
and an unavailable host service is a silent no-op. Nothing is retried;
a later commit supersedes any signal that was lost.
"""

from typing import Optional
from uuid import UUID

from ecusson.audit import AuditLogger
from ecusson.models.audit import AuditEventBuilder
from ecusson.models.ledger import LedgerBlob, LedgerSnapshot
from ecusson.models.platform import LiveActivityState
from ecusson.services.platform import (
    LiveActivityChannelInterface,
    PlatformUnavailableError,
    WidgetHostInterface,
)
from ecusson.services.storage import SharedLedgerRepository


class SyncBridge:
    """
    Persists ledger commits and signals the satellite processes.
    """

    def __init__(
        self,
        repository: SharedLedgerRepository,
        widget_host: Optional[WidgetHostInterface] = None,
        live_activity: Optional[LiveActivityChannelInterface] = None,
        widget_kind: Optional[str] = "EcussonWidget",
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the bridge.

        Args:
            repository: Shared ledger blob
            widget_host: Widget host to signal. If None, no refresh is sent.
            live_activity: Live activity channel. If None, nothing is pushed.
            widget_kind: Widget kind to reload; None reloads all kinds
            audit_logger: Audit logger for absorbed failures
        """
        self._repository = repository
        self._widget_host = widget_host
        self._live_activity = live_activity
        self._widget_kind = widget_kind
        self._audit_logger = audit_logger

    @property
    def repository(self) -> SharedLedgerRepository:
        return self._repository

    def read_blob(self, strict: bool = False) -> LedgerBlob:
        return self._repository.load(strict=strict)

    def read_snapshot(self) -> LedgerSnapshot:
        """Current snapshot; empty if the shared blob is unreadable."""
        return self.read_blob().snapshot()

    def publish(
        self,
        blob: LedgerBlob,
        today_total: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Commit `blob` to the shared app group, then signal the satellites.

        Raises:
            StorageError: If the blob could not be committed. No signal is
                          sent in that case.
        """
        self._repository.save(blob)
        self.signal(today_total, correlation_id=correlation_id)

    def signal(self, today_total: int, correlation_id: Optional[UUID] = None) -> None:
        """Send the refresh and live activity signals. Never raises."""
        self._request_widget_refresh(correlation_id)
        self._push_live_activity(today_total, correlation_id)

    def _request_widget_refresh(self, correlation_id: Optional[UUID]) -> None:
        if self._widget_host is None:
            return
        try:
            self._widget_host.request_refresh(self._widget_kind)
        except PlatformUnavailableError as e:
            self._audit(AuditEventBuilder.platform_unavailable(
                "widget", str(e), correlation_id=correlation_id,
            ))
            return
        except Exception as e:
            self._audit(AuditEventBuilder.system_error(
                error_type="widget_refresh_failed",
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            return
        self._audit(AuditEventBuilder.widget_refresh_requested(
            self._widget_kind, correlation_id=correlation_id,
        ))

    def _push_live_activity(self, today_total: int, correlation_id: Optional[UUID]) -> None:
        if self._live_activity is None:
            return
        try:
            self._live_activity.start_or_update(LiveActivityState(today_total=today_total))
        except PlatformUnavailableError as e:
            self._audit(AuditEventBuilder.platform_unavailable(
                "live_activity", str(e), correlation_id=correlation_id,
            ))
            return
        except Exception as e:
            self._audit(AuditEventBuilder.system_error(
                error_type="live_activity_failed",
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            return
        self._audit(AuditEventBuilder.live_activity_updated(
            today_total, correlation_id=correlation_id,
        ))

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)
