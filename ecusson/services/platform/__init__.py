"""
Host Platform Services Package

Narrow interfaces to the host's widget, live activity and notification
services, with shared-blob implementations.
"""

from ecusson.services.platform.interface import (
    LiveActivityChannelInterface,
    NotificationCenterInterface,
    PlatformError,
    PlatformUnavailableError,
    WidgetHostInterface,
)
from ecusson.services.platform.shared import (
    SharedLiveActivityChannel,
    SharedNotificationCenter,
    SharedSignalWidgetHost,
)
from ecusson.services.platform.reminders import ReminderScheduler

__all__ = [
    # Interfaces
    "LiveActivityChannelInterface",
    "NotificationCenterInterface",
    "WidgetHostInterface",
    # Exceptions
    "PlatformError",
    "PlatformUnavailableError",
    # Shared-blob implementations
    "SharedLiveActivityChannel",
    "SharedNotificationCenter",
    "SharedSignalWidgetHost",
    # Reminders
    "ReminderScheduler",
]
