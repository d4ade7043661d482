"""
Shared-blob Host Adapters

Implementations of the host service interfaces on top of the shared blob
store, so that the app, widget and live activity processes of one install
coordinate through the same app group container.

Each adapter owns one key of the group:
- the widget host writes a refresh signal with a growing generation
- the live activity channel writes the running session
- the notification center writes the list of pending reminders
"""

import json
from datetime import datetime
from typing import Callable, Optional

from pydantic import TypeAdapter, ValidationError

from ecusson.models.platform import (
    LiveActivitySession,
    LiveActivityState,
    ReminderRequest,
    WidgetRefreshSignal,
)
from ecusson.services.platform.interface import (
    LiveActivityChannelInterface,
    NotificationCenterInterface,
    PlatformUnavailableError,
    WidgetHostInterface,
)
from ecusson.services.storage import BlobStoreInterface


_PENDING_LIST = TypeAdapter(list[ReminderRequest])


def _local_now() -> datetime:
    return datetime.now().astimezone()


class SharedSignalWidgetHost(WidgetHostInterface):
    """
    Widget host that publishes refresh requests as a generation counter.

    Requests are coalesced: readers only see the latest generation, however
    many requests were issued in between.
    """

    def __init__(
        self,
        blob_store: BlobStoreInterface,
        key: str = "widget-refresh",
        clock: Callable[[], datetime] = _local_now,
    ):
        self._store = blob_store
        self._key = key
        self._clock = clock

    def current_signal(self) -> WidgetRefreshSignal:
        """Latest refresh signal; generation 0 if none was ever issued."""
        data = self._store.read(self._key)
        if data is None:
            return WidgetRefreshSignal()
        try:
            return WidgetRefreshSignal.model_validate_json(data)
        except ValidationError:
            return WidgetRefreshSignal()

    def request_refresh(self, kind: Optional[str] = None) -> None:
        current = self.current_signal()
        signal = WidgetRefreshSignal(
            generation=current.generation + 1,
            kind=kind,
            requested_at=self._clock(),
        )
        self._store.write(self._key, signal.model_dump_json().encode("utf-8"))


class SharedLiveActivityChannel(LiveActivityChannelInterface):
    """
    Live activity channel recording the running session in the app group.

    Args:
        enabled: False behaves like a device without live activity support
    """

    def __init__(
        self,
        blob_store: BlobStoreInterface,
        key: str = "live-activity",
        enabled: bool = True,
        clock: Callable[[], datetime] = _local_now,
    ):
        self._store = blob_store
        self._key = key
        self._enabled = enabled
        self._clock = clock

    def current_session(self) -> Optional[LiveActivitySession]:
        data = self._store.read(self._key)
        if data is None:
            return None
        try:
            return LiveActivitySession.model_validate_json(data)
        except ValidationError:
            return None

    def current_state(self) -> Optional[LiveActivityState]:
        session = self.current_session()
        return session.state if session else None

    def start_or_update(self, state: LiveActivityState) -> None:
        if not self._enabled:
            raise PlatformUnavailableError("Live activities are not available")

        now = self._clock()
        session = self.current_session()
        if session is None:
            session = LiveActivitySession(state=state, started_at=now, updated_at=now)
        else:
            session = LiveActivitySession(
                state=state,
                started_at=session.started_at,
                updated_at=now,
                update_count=session.update_count + 1,
            )
        self._store.write(self._key, session.model_dump_json(by_alias=True).encode("utf-8"))


class SharedNotificationCenter(NotificationCenterInterface):
    """
    Notification center keeping pending requests in the app group.

    Adding a request with an identifier that is already pending replaces it.

    Args:
        authorized: False behaves like a user who denied notifications
    """

    def __init__(
        self,
        blob_store: BlobStoreInterface,
        key: str = "notifications",
        authorized: bool = True,
    ):
        self._store = blob_store
        self._key = key
        self._authorized = authorized

    def pending_requests(self) -> list[ReminderRequest]:
        data = self._store.read(self._key)
        if data is None:
            return []
        try:
            return _PENDING_LIST.validate_json(data)
        except ValidationError:
            return []

    def pending_identifiers(self) -> list[str]:
        return [request.identifier for request in self.pending_requests()]

    def add(self, request: ReminderRequest) -> None:
        if not self._authorized:
            raise PlatformUnavailableError("Notifications are not authorized")

        pending = [r for r in self.pending_requests() if r.identifier != request.identifier]
        pending.append(request)
        self._write(pending)

    def remove(self, identifier: str) -> bool:
        pending = self.pending_requests()
        kept = [r for r in pending if r.identifier != identifier]
        if len(kept) == len(pending):
            return False
        self._write(kept)
        return True

    def _write(self, pending: list[ReminderRequest]) -> None:
        payload = [request.model_dump(mode="json") for request in pending]
        self._store.write(self._key, json.dumps(payload).encode("utf-8"))
