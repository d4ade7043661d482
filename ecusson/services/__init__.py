"""Services package."""

from ecusson.services.storage import (
    BlobStoreInterface,
    CorruptBlobError,
    FileBlobStore,
    InMemoryBlobStore,
    SharedLedgerRepository,
    StorageError,
    StorageUnavailableError,
)
from ecusson.services.platform import (
    LiveActivityChannelInterface,
    NotificationCenterInterface,
    PlatformError,
    PlatformUnavailableError,
    ReminderScheduler,
    SharedLiveActivityChannel,
    SharedNotificationCenter,
    SharedSignalWidgetHost,
    WidgetHostInterface,
)

__all__ = [
    # Storage services
    "BlobStoreInterface",
    "CorruptBlobError",
    "FileBlobStore",
    "InMemoryBlobStore",
    "SharedLedgerRepository",
    "StorageError",
    "StorageUnavailableError",
    # Platform services
    "LiveActivityChannelInterface",
    "NotificationCenterInterface",
    "PlatformError",
    "PlatformUnavailableError",
    "ReminderScheduler",
    "SharedLiveActivityChannel",
    "SharedNotificationCenter",
    "SharedSignalWidgetHost",
    "WidgetHostInterface",
]
