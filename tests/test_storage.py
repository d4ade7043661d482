"""
Tests for the shared blob stores and the ledger repository.
"""

import json
from datetime import date, datetime, timezone

import pytest

from ecusson.models.audit import AuditEventType
from ecusson.models.ledger import EntryKind, LedgerBlob, SpendEntry
from ecusson.services.storage import (
    CorruptBlobError,
    FileBlobStore,
    InMemoryBlobStore,
    SharedLedgerRepository,
    StorageUnavailableError,
    decode_blob,
    encode_blob,
)


NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_blob(*amounts: int, day: date = date(2024, 3, 10)) -> LedgerBlob:
    return LedgerBlob(
        entries=[SpendEntry(day=day, amount=amount, recorded_at=NOW) for amount in amounts]
    )


class TestFileBlobStore:
    """Tests for the file-backed app group store."""

    def test_missing_key_reads_none(self, tmp_path):
        """Test that an unknown key is absent, not an error."""
        assert FileBlobStore(tmp_path).read("history") is None

    def test_write_then_read(self, tmp_path):
        """Test a simple write and read."""
        store = FileBlobStore(tmp_path / "group")
        store.write("history", b'{"entries": []}')
        assert store.read("history") == b'{"entries": []}'
        assert (tmp_path / "group" / "history.json").exists()

    def test_write_replaces_whole_blob(self, tmp_path):
        """Test that a second write replaces the first and leaves no temp file."""
        store = FileBlobStore(tmp_path)
        store.write("history", b"first version, longer than the second")
        store.write("history", b"second")
        assert store.read("history") == b"second"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["history.json"]

    def test_delete(self, tmp_path):
        """Test deleting present and absent keys."""
        store = FileBlobStore(tmp_path)
        store.write("live-activity", b"{}")
        assert store.delete("live-activity") is True
        assert store.delete("live-activity") is False
        assert store.read("live-activity") is None

    @pytest.mark.parametrize("key", ["", "..", "../history", "a/b", "his tory"])
    def test_invalid_key(self, tmp_path, key):
        """Test that keys cannot escape the group directory."""
        with pytest.raises(ValueError):
            FileBlobStore(tmp_path).read(key)

    def test_unwritable_location_is_unavailable(self, tmp_path):
        """Test that a group directory blocked by a file is reported as unavailable."""
        blocker = tmp_path / "group"
        blocker.write_text("not a directory")
        store = FileBlobStore(blocker)
        with pytest.raises(StorageUnavailableError):
            store.write("history", b"{}")


class TestInMemoryBlobStore:
    """Tests for the in-memory store used by tests."""

    def test_unavailable_store_fails_every_call(self):
        """Test the unavailable switch."""
        store = InMemoryBlobStore()
        store.write("history", b"x")
        store.available = False
        with pytest.raises(StorageUnavailableError):
            store.read("history")
        with pytest.raises(StorageUnavailableError):
            store.write("history", b"y")
        store.available = True
        assert store.read("history") == b"x"
        assert store.write_count == 1


class TestBlobCodec:
    """Tests for encode_blob and decode_blob."""

    def test_round_trip(self):
        """Test that the event log layout round-trips."""
        blob = make_blob(1, -1, 10)
        assert decode_blob(encode_blob(blob)) == blob

    def test_legacy_map_is_migrated(self):
        """Test that the legacy day -> total map becomes SET entries."""
        data = json.dumps({"2024-01-02": 7, "2024-01-01": 3}).encode("utf-8")
        blob = decode_blob(data)
        assert [entry.kind for entry in blob.entries] == [EntryKind.SET, EntryKind.SET]
        assert blob.snapshot().totals == {date(2024, 1, 1): 3, date(2024, 1, 2): 7}

    def test_empty_legacy_map(self):
        """Test that an empty legacy map is an empty ledger."""
        assert decode_blob(b"{}").entries == []

    @pytest.mark.parametrize("data", [
        b"not json",
        b"\xff\xfe",
        b"[1, 2]",
        b'"history"',
        b'{"2024-01-01": "five"}',
        b'{"not-a-day": 5}',
        b'{"entries": [{"day": "2024-01-01"}]}',
    ])
    def test_corrupt_blob(self, data):
        """Test that undecodable blobs raise CorruptBlobError."""
        with pytest.raises(CorruptBlobError):
            decode_blob(data)


class TestSharedLedgerRepository:
    """Tests for the ledger blob contract."""

    def test_missing_blob_is_empty_ledger(self, repository):
        """Test that a fresh install reads as an empty ledger."""
        assert repository.load().entries == []

    def test_save_then_load(self, repository):
        """Test that a saved blob is read back."""
        blob = make_blob(2, 3)
        repository.save(blob)
        assert repository.load() == blob

    def test_corrupt_blob_reads_empty_and_is_audited(self, blob_store, repository, audit_logger):
        """Test that a corrupt blob is an empty ledger, never an error."""
        blob_store.write("history", b"garbage")
        assert repository.load().entries == []
        event = audit_logger.recent_events()[0]
        assert event.event_type == AuditEventType.SNAPSHOT_UNREADABLE
        assert "history-corrupt" not in blob_store.keys()

    def test_strict_load_preserves_corrupt_blob(self, blob_store, repository):
        """Test that a writer keeps a copy of the corrupt blob before replacing it."""
        blob_store.write("history", b"garbage")
        assert repository.load(strict=True).entries == []
        assert blob_store.read("history-corrupt") == b"garbage"

    def test_unavailable_storage_reads_empty(self, blob_store, repository):
        """Test that readers fall back to an empty ledger."""
        repository.save(make_blob(5))
        blob_store.available = False
        assert repository.load().entries == []

    def test_unavailable_storage_strict_load_raises(self, blob_store, repository):
        """Test that writers do not mistake unavailable storage for an empty ledger."""
        blob_store.available = False
        with pytest.raises(StorageUnavailableError):
            repository.load(strict=True)

    def test_failed_save_is_audited_and_raised(self, blob_store, repository, audit_logger):
        """Test that a failed commit propagates."""
        blob_store.available = False
        with pytest.raises(StorageUnavailableError):
            repository.save(make_blob(1))
        event = audit_logger.recent_events()[0]
        assert event.event_type == AuditEventType.SNAPSHOT_SAVE_FAILED

    def test_custom_key(self, blob_store):
        """Test that the repository only touches its own key."""
        repository = SharedLedgerRepository(blob_store, key="ledger-v2")
        repository.save(make_blob(1))
        assert blob_store.keys() == ["ledger-v2"]
        assert repository.key == "ledger-v2"
