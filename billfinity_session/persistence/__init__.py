"""
Persistence module - Session storage

Provides:
- JSONStore: JSON file handling
- KeyValueStorage: get/set/remove interface, with MemoryStorage and
  JSONFileStorage backends
- TokenStore: access/refresh token slots and cached user snapshot
"""

from .json_store import JSONStore, JSONStoreError
from .storage import (
    KeyValueStorage,
    MemoryStorage,
    JSONFileStorage,
    StorageError,
    StorageUnavailableError,
)
from .token_store import TokenStore

__all__ = [
    "JSONStore",
    "JSONStoreError",
    "KeyValueStorage",
    "MemoryStorage",
    "JSONFileStorage",
    "StorageError",
    "StorageUnavailableError",
    "TokenStore",
]
