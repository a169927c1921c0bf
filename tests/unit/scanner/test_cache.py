"""Unit tests for ScanCache."""

import json

import pytest

from groupwatch.scanner import SCANNED_DATA_KEY, ScanCache, ScanRecord
from groupwatch.state_store import KeyValueStore


@pytest.fixture
def cache(store: KeyValueStore) -> ScanCache:
    return ScanCache(store)


@pytest.mark.unit
class TestScanCache:
    """Tests for ScanCache."""

    def test_empty(self, cache: ScanCache) -> None:
        assert cache.load() is None
        assert not cache.is_valid_for("10")

    def test_round_trip(self, cache: ScanCache) -> None:
        """A saved record is valid for its own root group."""
        saved = cache.save([101, 102, 103], "10")

        record = cache.get_valid("10")
        assert record is not None
        assert record.project_ids == [101, 102, 103]
        assert record.root_group_id == "10"
        assert record.last_scan == saved.last_scan

    def test_miss_for_other_root_group(self, cache: ScanCache) -> None:
        cache.save([101], "10")

        assert cache.get_valid("20") is None
        assert not cache.is_valid_for("20")

    def test_save_overwrites(self, cache: ScanCache) -> None:
        cache.save([101], "10")
        cache.save([201, 202], "20")

        assert cache.get_valid("10") is None
        assert cache.get_valid("20").project_ids == [201, 202]

    def test_clear(self, cache: ScanCache) -> None:
        cache.save([101], "10")
        cache.clear()

        assert cache.load() is None

    def test_empty_scan_is_cached(self, cache: ScanCache) -> None:
        cache.save([], "10")

        assert cache.get_valid("10").project_ids == []

    def test_stored_format(self, cache: ScanCache, store: KeyValueStore) -> None:
        """Stored JSON uses projectIds, lastScan and rootGroupId."""
        cache.save([7], "10")

        data = json.loads(store.get(SCANNED_DATA_KEY))
        assert data["projectIds"] == [7]
        assert data["rootGroupId"] == "10"
        assert data["lastScan"]

    def test_unreadable_record_ignored(self, cache: ScanCache, store: KeyValueStore) -> None:
        store.set(SCANNED_DATA_KEY, "{not json")

        assert cache.load() is None

    def test_record_written_by_other_client(self, cache: ScanCache, store: KeyValueStore) -> None:
        """Records with numeric root group IDs are still recognized."""
        store.set(
            SCANNED_DATA_KEY,
            json.dumps(
                {"projectIds": [1, 2], "lastScan": "2024-01-01T00:00:00Z", "rootGroupId": 10}
            ),
        )

        assert cache.get_valid("10") == ScanRecord("10", [1, 2], "2024-01-01T00:00:00Z")
