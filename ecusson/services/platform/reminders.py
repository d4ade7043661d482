"""
Daily Reminder Scheduling

Registers the daily "have you recorded your expenses?" notification.
Registration is idempotent: nothing is added when a request with the same
identifier is already pending. Unavailable notifications, or an app group
that cannot be read or written, are a silent no-op.
"""

from typing import Optional

from ecusson.audit import AuditLogger
from ecusson.config.settings import ReminderSettings
from ecusson.models.audit import AuditEventBuilder
from ecusson.models.platform import ReminderRequest
from ecusson.services.platform.interface import (
    NotificationCenterInterface,
    PlatformUnavailableError,
)
from ecusson.services.storage import StorageError


class ReminderScheduler:
    """Keeps exactly one daily reminder registered with the host."""

    def __init__(
        self,
        notification_center: NotificationCenterInterface,
        settings: Optional[ReminderSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._center = notification_center
        self._settings = settings or ReminderSettings()
        self._audit_logger = audit_logger

    def build_request(self) -> ReminderRequest:
        return ReminderRequest(
            identifier=self._settings.identifier,
            title=self._settings.title,
            body=self._settings.body,
            hour=self._settings.hour,
            minute=self._settings.minute,
            repeats=True,
        )

    def ensure_daily(self) -> bool:
        """
        Register the daily reminder unless it is already pending.

        Returns:
            True if a new request was registered
        """
        if not self._settings.enabled:
            return False

        identifier = self._settings.identifier
        try:
            if identifier in self._center.pending_identifiers():
                self._audit(AuditEventBuilder.reminder_already_pending(identifier))
                return False
            self._center.add(self.build_request())
        except (PlatformUnavailableError, StorageError) as e:
            self._audit(AuditEventBuilder.platform_unavailable("notifications", str(e)))
            return False

        self._audit(AuditEventBuilder.reminder_scheduled(
            identifier=identifier,
            hour=self._settings.hour,
            minute=self._settings.minute,
        ))
        return True

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)
