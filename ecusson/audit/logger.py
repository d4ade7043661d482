"""
Audit Logger

DESIGN DECISION: Every significant ledger action is logged.
This provides:
1. Traceability of every mutation across processes
2. Debugging capability for absorbed host-service failures
3. A record of imports and exports

The audit logger:
- Never raises (a logging failure must not break a ledger write)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ecusson.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at `level`."""
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger("ecusson").setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Emits every event as a structured log record and keeps the most recent
    events in memory so surfaces can show what just happened.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("ecusson.audit")
        self._history_size = history_size
        self._recent: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be emitted.
        """
        self._recent.append(event)
        if len(self._recent) > self._history_size:
            del self._recent[: len(self._recent) - self._history_size]

        log_dict = event.to_log_dict()
        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Never let logging break the caller
            return False
        return True

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._recent[-limit:]))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., one button press)
    and pass it to the store, the bridge and the transfer.
    """
    return uuid4()
