"""
Data Models Package

This package contains all Pydantic models used in Ecusson.
Everything written to the shared blob or pushed to a host service
must conform to these schemas.
"""

from ecusson.models.ledger import (
    EntryKind,
    LedgerBlob,
    LedgerSnapshot,
    SpendEntry,
    SpendSummary,
)
from ecusson.models.platform import (
    LiveActivitySession,
    LiveActivityState,
    ReminderRequest,
    WidgetEntry,
    WidgetRefreshSignal,
)
from ecusson.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "EntryKind",
    "LedgerBlob",
    "LedgerSnapshot",
    "SpendEntry",
    "SpendSummary",
    # Platform payloads
    "LiveActivitySession",
    "LiveActivityState",
    "ReminderRequest",
    "WidgetEntry",
    "WidgetRefreshSignal",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
