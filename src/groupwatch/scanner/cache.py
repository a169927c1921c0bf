"""ScanCache - Persists the project IDs of the last scan."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from groupwatch.scanner.models import ScanRecord

if TYPE_CHECKING:
    from groupwatch.state_store import KeyValueStore

logger = logging.getLogger("groupwatch.scanner.cache")

SCANNED_DATA_KEY = "gitlab_scanned_data"


class ScanCache:
    """Single scan record stored in a KeyValueStore.

    A record is valid for a root group if and only if it was written for
    that same root group. There is no time-based expiry.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def load(self) -> ScanRecord | None:
        """Load the stored record, or None if there is none or it is unreadable."""
        raw = self._store.get(SCANNED_DATA_KEY)
        if raw is None:
            return None
        try:
            return ScanRecord.from_dict(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding unreadable scan cache record: %s", e)
            return None

    def save(self, project_ids: list[int], root_group_id: str) -> ScanRecord:
        """Overwrite the stored record with a new scan result."""
        record = ScanRecord(
            root_group_id=root_group_id,
            project_ids=list(project_ids),
            last_scan=datetime.now(UTC).isoformat(),
        )
        self._store.set(SCANNED_DATA_KEY, json.dumps(record.to_dict()))
        logger.info("Cached %d project ID(s) for group %s", len(project_ids), root_group_id)
        return record

    def clear(self) -> None:
        if self._store.delete(SCANNED_DATA_KEY):
            logger.info("Scan cache cleared")

    def get_valid(self, root_group_id: str) -> ScanRecord | None:
        """Return the stored record if it belongs to ``root_group_id``."""
        record = self.load()
        if record is None or record.root_group_id != root_group_id:
            return None
        return record

    def is_valid_for(self, root_group_id: str) -> bool:
        return self.get_valid(root_group_id) is not None
