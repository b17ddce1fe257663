"""
Storage - Key-value persistence surfaces for session data

Module: persistence.storage
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial implementation
  - KeyValueStorage interface (get/set/remove)
  - MemoryStorage for tests and short-lived processes
  - JSONFileStorage: one JSON file per client profile

ARCHITECTURE:
A storage scope is one backend instance. Values are strings; get() on a
missing key returns None. Backend failures surface as StorageError and
are handled by the session layer.
"""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from .json_store import JSONStore, JSONStoreError, JSONStoreFormatError
from ..core.constants import DEFAULT_DATA_DIR, DEFAULT_PROFILE


class StorageError(Exception):
    """Base storage error"""
    pass


class StorageUnavailableError(StorageError):
    """Backing storage cannot be read or written"""
    pass


_PROFILE_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(ABC):
    """String key-value persistence surface"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return value or None when absent"""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key; no-op when absent"""

    def remove_many(self, keys) -> None:
        for key in keys:
            self.remove(key)


class MemoryStorage(KeyValueStorage):
    """In-process storage, lost when the object goes away"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self):
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class JSONFileStorage(KeyValueStorage):
    """
    Per-profile storage in <data_dir>/<profile>.json.

    Survives process restarts the way browser local storage survives page
    loads. File layout: {"items": {key: value, ...}}.
    """

    def __init__(self, data_dir: str = DEFAULT_DATA_DIR, profile: str = DEFAULT_PROFILE):
        """
        Initialize file storage

        Args:
            data_dir: Directory holding profile files
            profile: Profile name (letters, digits, '_', '-', '.')

        Raises:
            ValueError: If profile name is invalid
            StorageUnavailableError: If the file cannot be created
        """
        if not _PROFILE_RE.match(profile or "") or profile in (".", ".."):
            raise ValueError(f"Invalid profile name: {profile!r}")

        self.logger = logging.getLogger("persistence.storage")
        self.profile = profile
        self.file_path = Path(data_dir) / f"{profile}.json"

        try:
            self.store = JSONStore(str(self.file_path), {"items": {}})
        except JSONStoreError as e:
            raise StorageUnavailableError(str(e)) from e

    def get(self, key: str) -> Optional[str]:
        return self._items().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        items = data.get("items")
        if not isinstance(items, dict):
            self.logger.warning(f"Profile {self.profile} has no items mapping, resetting")
            items = data["items"] = {}
        items[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        items = data.get("items")
        if isinstance(items, dict) and key in items:
            del items[key]
            self._save(data)

    def remove_many(self, keys) -> None:
        try:
            data = self.store.load()
        except JSONStoreFormatError as e:
            # Unparseable profile holds no recoverable session
            self.logger.warning(f"Profile {self.profile} is corrupted, resetting: {e}")
            self._save({"items": {}})
            return
        except JSONStoreError as e:
            raise StorageUnavailableError(str(e)) from e

        items = data.get("items")
        if not isinstance(items, dict):
            data["items"] = {}
            self._save(data)
            return
        removed = [k for k in keys if items.pop(k, None) is not None]
        if removed:
            self._save(data)

    def _items(self) -> Dict[str, str]:
        items = self._load().get("items")
        if not isinstance(items, dict):
            self.logger.warning(f"Profile {self.profile} has no items mapping")
            return {}
        return items

    def _load(self) -> dict:
        try:
            return self.store.load()
        except JSONStoreError as e:
            raise StorageUnavailableError(str(e)) from e

    def _save(self, data: dict) -> None:
        try:
            self.store.save(data)
        except JSONStoreError as e:
            raise StorageUnavailableError(str(e)) from e
