"""State Store - Persistent key-value storage."""

from groupwatch.state_store.exceptions import InvalidKeyError, StateStoreError
from groupwatch.state_store.models import KeyValue
from groupwatch.state_store.store import KeyValueStore

__all__ = [
    "InvalidKeyError",
    "KeyValue",
    "KeyValueStore",
    "StateStoreError",
]
