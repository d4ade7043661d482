"""
Abstract Host Service Interfaces

DESIGN DECISION: Widget refresh, live activities and local notifications
are host services outside the ledger core. Each is a narrow, one-way
capability injected into the sync bridge or the reminder scheduler.

None of them guarantees delivery, ordering or timing:
- A widget refresh request may be coalesced or delayed by the host
- A live activity update may be throttled by the host
- Either may be unavailable (permissions, platform version)
"""

from abc import ABC, abstractmethod
from typing import Optional

from ecusson.models.platform import LiveActivityState, ReminderRequest


class WidgetHostInterface(ABC):
    """Widget-hosting subsystem."""

    @abstractmethod
    def request_refresh(self, kind: Optional[str] = None) -> None:
        """
        Ask the host to re-render widgets.

        Fire-and-forget, idempotent and coalescible.

        Args:
            kind: Widget kind to reload; None reloads every kind
        """
        pass


class LiveActivityChannelInterface(ABC):
    """Long-lived on-screen live activity surface."""

    @abstractmethod
    def start_or_update(self, state: LiveActivityState) -> None:
        """
        Start the live activity, or update it if already running.

        Raises:
            PlatformUnavailableError: If live activities are not available
        """
        pass


class NotificationCenterInterface(ABC):
    """Local user notification scheduler."""

    @abstractmethod
    def pending_identifiers(self) -> list[str]:
        """Identifiers of the requests waiting to be delivered."""
        pass

    @abstractmethod
    def add(self, request: ReminderRequest) -> None:
        """
        Register a notification request.

        Raises:
            PlatformUnavailableError: If notifications are not permitted
        """
        pass


class PlatformError(Exception):
    """Base exception for host service calls."""
    pass


class PlatformUnavailableError(PlatformError):
    """The host service is not permitted or not supported here."""
    pass
