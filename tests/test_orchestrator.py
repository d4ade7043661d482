"""
End-to-end tests: the app and widget processes wired by the orchestrator,
sharing one in-memory app group.
"""

from datetime import date

import pytest

from ecusson.codec import EmptyHistoryError
from ecusson.config import Settings
from ecusson.orchestrator import create_app_components, create_widget_components
from ecusson.services.platform import (
    SharedLiveActivityChannel,
    SharedNotificationCenter,
    SharedSignalWidgetHost,
)
from ecusson.services.storage import InMemoryBlobStore


TODAY = date(2024, 3, 10)


@pytest.fixture
def settings(monkeypatch, tmp_path):
    monkeypatch.setenv("ECUSSON_LEDGER_TIMEZONE", "Europe/Paris")
    monkeypatch.setenv("ECUSSON_STORAGE_SHARED_DIR", str(tmp_path / "shared"))
    for name in ("TRAILING_DAYS", "WIDGET_KIND"):
        monkeypatch.delenv(f"ECUSSON_LEDGER_{name}", raising=False)
    monkeypatch.delenv("ECUSSON_REMINDER_ENABLED", raising=False)
    return Settings()


@pytest.fixture
def tracker(settings, blob_store, clock):
    return create_app_components(settings=settings, blob_store=blob_store, clock=clock)


class TestAppFlow:
    """Tests for the app process."""

    def test_launch_registers_reminder_once(self, settings, blob_store, clock):
        """Test that every launch leaves exactly one pending reminder."""
        for _ in range(2):
            summary = create_app_components(settings=settings, blob_store=blob_store, clock=clock).launch()
            assert summary.today == 0
        assert SharedNotificationCenter(blob_store).pending_identifiers() == ["dailyExpenseReminder"]

    def test_launch_with_unavailable_app_group(self, settings, clock):
        """Test that launch shows an empty ledger when the app group cannot be read."""
        blob_store = InMemoryBlobStore(available=False)
        tracker = create_app_components(settings=settings, blob_store=blob_store, clock=clock)

        summary = tracker.launch()
        assert summary.today == 0
        assert summary.trailing == 0
        assert summary.year_to_date == 0

        blob_store.available = True
        assert SharedNotificationCenter(blob_store).pending_identifiers() == []

    def test_add_amounts(self, tracker):
        """Test the three figures after a few taps."""
        for delta in (1, 1, -1, 10):
            tracker.add_amount(delta)
        summary = tracker.summary()
        assert summary.day == TODAY
        assert summary.today == 11
        assert summary.trailing == 11
        assert summary.trailing_days == 28
        assert summary.year_to_date == 11

    def test_history(self, tracker):
        """Test the per-day series ending today."""
        tracker.add_amount(3)
        assert tracker.history(days=3) == [
            (date(2024, 3, 8), 0),
            (date(2024, 3, 9), 0),
            (TODAY, 3),
        ]
        assert tracker.history(days=0) == []

    def test_live_activity_follows_today(self, tracker, blob_store):
        """Test that the live activity carries today's running total."""
        tracker.add_amount(4)
        tracker.add_amount(1)
        assert SharedLiveActivityChannel(blob_store).current_state().today_total == 5

    def test_without_live_activity_or_notifications(self, settings, blob_store, clock):
        """Test a device without live activities that denied notifications."""
        tracker = create_app_components(
            settings=settings,
            blob_store=blob_store,
            clock=clock,
            live_activity_enabled=False,
            notifications_authorized=False,
        )
        tracker.launch()
        assert tracker.add_amount(2) == 2
        assert "live-activity" not in blob_store.keys()
        assert "notifications" not in blob_store.keys()

    def test_export_then_import_elsewhere(self, tracker, settings, clock, tmp_path):
        """Test moving the history to a fresh install through a file."""
        with pytest.raises(EmptyHistoryError):
            tracker.export_to(tmp_path / "history.md")

        tracker.add_amount(12)
        assert tracker.export_to(tmp_path / "history.md") == 1

        other = create_app_components(settings=settings, blob_store=InMemoryBlobStore(), clock=clock)
        assert other.import_from(tmp_path / "history.md") == 1
        assert other.summary().today == 12

    def test_import_text(self, tracker):
        """Test importing pasted history text."""
        assert tracker.import_text("2024-03-09,4\nbad line\n2024-03-10,6\n") == 2
        summary = tracker.summary()
        assert summary.today == 6
        assert summary.trailing == 10
        assert tracker.export_text() == "2024-03-09,4\n2024-03-10,6\n"

    def test_file_store_by_default(self, settings, clock, tmp_path):
        """Test that the default app group lives under the configured shared directory."""
        tracker = create_app_components(settings=settings, clock=clock)
        tracker.add_amount(1)
        group_dir = settings.storage.group_dir
        assert (group_dir / "history.json").exists()
        assert group_dir.is_relative_to(tmp_path)


class TestWidgetFlow:
    """Tests for the widget process against the app process."""

    def test_widget_sees_app_commits(self, tracker, settings, blob_store, clock):
        """Test that the widget re-renders after an app commit."""
        timeline, _ = create_widget_components(settings=settings, blob_store=blob_store, clock=clock)
        assert timeline.poll().summary.today == 0

        tracker.add_amount(4)
        entry = timeline.poll()
        assert entry.summary.today == 4

    def test_app_sees_widget_buttons(self, tracker, settings, blob_store, clock):
        """Test that widget button presses land in the shared ledger."""
        tracker.add_amount(4)
        _, control = create_widget_components(settings=settings, blob_store=blob_store, clock=clock)

        assert control.add_one() == 5
        assert tracker.summary().today == 5
        assert SharedSignalWidgetHost(blob_store).current_signal().kind is None

    def test_widget_button_does_not_touch_live_activity(self, tracker, settings, blob_store, clock):
        """Test that only the app process drives the live activity."""
        tracker.add_amount(4)
        _, control = create_widget_components(settings=settings, blob_store=blob_store, clock=clock)
        control.remove_one()
        assert SharedLiveActivityChannel(blob_store).current_state().today_total == 4
