"""
Audit Models for Ecusson

Every significant ledger action is logged for audit purposes.
This provides:
1. Traceability of every mutation, import and export
2. Debugging information when a host service misbehaves
3. Visibility into failures that are deliberately absorbed

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Ledger
    LEDGER_ADJUSTED = "ledger_adjusted"
    SNAPSHOT_UNREADABLE = "snapshot_unreadable"
    SNAPSHOT_SAVE_FAILED = "snapshot_save_failed"

    # Import / export
    HISTORY_IMPORTED = "history_imported"
    HISTORY_EXPORTED = "history_exported"
    IMPORT_FAILED = "import_failed"
    EXPORT_FAILED = "export_failed"

    # Cross-process propagation
    WIDGET_REFRESH_REQUESTED = "widget_refresh_requested"
    LIVE_ACTIVITY_UPDATED = "live_activity_updated"
    PLATFORM_UNAVAILABLE = "platform_unavailable"

    # Reminders
    REMINDER_SCHEDULED = "reminder_scheduled"
    REMINDER_ALREADY_PENDING = "reminder_already_pending"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'ledger', 'widget', 'reminder')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one button press)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.ledger_adjusted(entry_id, day, 1, 12, correlation_id)
        event = AuditEventBuilder.history_imported(3, correlation_id)
    """

    @staticmethod
    def ledger_adjusted(
        entry_id: UUID,
        day: date,
        delta: int,
        new_total: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_ADJUSTED,
            entity_type="ledger",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"Ledger adjusted by {delta:+d} on {day.isoformat()}",
            details={
                "day": day.isoformat(),
                "delta": delta,
                "new_total": new_total,
            },
            is_user_action=True,
        )

    @staticmethod
    def snapshot_unreadable(
        key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_UNREADABLE,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description=f"Shared ledger '{key}' unreadable, using an empty ledger",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def snapshot_save_failed(
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Could not commit shared ledger '{key}'",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def history_imported(
        day_count: int,
        correlation_id: Optional[UUID] = None,
        source: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_IMPORTED,
            entity_type="history",
            correlation_id=correlation_id,
            description=f"History imported: {day_count} day(s)",
            details={"day_count": day_count, "source": source},
            is_user_action=True,
        )

    @staticmethod
    def history_exported(
        day_count: int,
        correlation_id: Optional[UUID] = None,
        destination: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_EXPORTED,
            entity_type="history",
            correlation_id=correlation_id,
            description=f"History exported: {day_count} day(s)",
            details={"day_count": day_count, "destination": destination},
            is_user_action=True,
        )

    @staticmethod
    def transfer_failed(
        direction: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.IMPORT_FAILED
            if direction == "import"
            else AuditEventType.EXPORT_FAILED
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.ERROR,
            entity_type="history",
            correlation_id=correlation_id,
            description=f"History {direction} failed",
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def widget_refresh_requested(
        kind: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WIDGET_REFRESH_REQUESTED,
            severity=AuditSeverity.DEBUG,
            entity_type="widget",
            correlation_id=correlation_id,
            description=f"Widget refresh requested for {kind or 'all kinds'}",
            details={"kind": kind},
        )

    @staticmethod
    def live_activity_updated(
        today_total: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LIVE_ACTIVITY_UPDATED,
            severity=AuditSeverity.DEBUG,
            entity_type="live_activity",
            correlation_id=correlation_id,
            description=f"Live activity updated with today total {today_total}",
            details={"today_total": today_total},
        )

    @staticmethod
    def platform_unavailable(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PLATFORM_UNAVAILABLE,
            severity=AuditSeverity.DEBUG,
            entity_type=service,
            correlation_id=correlation_id,
            description=f"{service} unavailable, skipped",
            error_message=error_message,
        )

    @staticmethod
    def reminder_scheduled(
        identifier: str,
        hour: int,
        minute: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_SCHEDULED,
            entity_type="reminder",
            description=f"Daily reminder '{identifier}' scheduled at {hour:02d}:{minute:02d}",
            details={"identifier": identifier, "hour": hour, "minute": minute},
        )

    @staticmethod
    def reminder_already_pending(identifier: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_ALREADY_PENDING,
            severity=AuditSeverity.DEBUG,
            entity_type="reminder",
            description=f"Daily reminder '{identifier}' already pending",
            details={"identifier": identifier},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
