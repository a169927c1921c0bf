"""KeyValueStore - String key-value persistence on SQLite."""

from __future__ import annotations

import logging

from sqlalchemy import delete

from groupwatch.state_store.database import Database
from groupwatch.state_store.exceptions import InvalidKeyError
from groupwatch.state_store.models import KeyValue

logger = logging.getLogger("groupwatch.state_store")

MAX_KEY_LENGTH = 255


class KeyValueStore:
    """Persistent string key-value store.

    Used for the scan cache record and the saved connection settings.
    """

    def __init__(self, db_path: str = "groupwatch.db") -> None:
        """Initialize the store with a SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self._db = Database(db_path)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def get(self, key: str) -> str | None:
        """Get the value stored under ``key``.

        Returns:
            The value, or None if the key is absent
        """
        _check_key(key)
        with self._db.session() as session:
            item = session.get(KeyValue, key)
            return item.value if item is not None else None

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        _check_key(key)
        with self._db.session() as session:
            item = session.get(KeyValue, key)
            if item is None:
                session.add(KeyValue(key=key, value=value))
            else:
                item.value = value
        logger.debug("Stored key %s (%d chars)", key, len(value))

    def delete(self, key: str) -> bool:
        """Delete ``key``.

        Returns:
            True if a value was deleted
        """
        _check_key(key)
        with self._db.session() as session:
            result = session.execute(delete(KeyValue).where(KeyValue.key == key))
            deleted = bool(result.rowcount)
        if deleted:
            logger.debug("Deleted key %s", key)
        return deleted


def _check_key(key: str) -> None:
    if not key or len(key) > MAX_KEY_LENGTH:
        raise InvalidKeyError(f"Invalid key {key!r}")
