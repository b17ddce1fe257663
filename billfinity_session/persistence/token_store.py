"""
Token Store - Scoped persistence of the active session

Module: persistence.token_store
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial implementation
  - Access/refresh token slots under well-known keys
  - Cached user-profile snapshot
  - Pair writes and full clear

ARCHITECTURE:
TokenStore restricts a KeyValueStorage to the keys named by StorageKeys.
Only SessionManager writes through it. Reads return None for absent keys;
StorageError from the backend propagates.
"""

import json
import logging
from typing import Optional, Dict, Any

from .storage import KeyValueStorage, MemoryStorage
from ..core.config import StorageKeys


class TokenStore:
    """
    Persists the session's tokens in one storage scope.

    Keys outside StorageKeys are refused so the store can never touch data
    it does not own.
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        keys: Optional[StorageKeys] = None,
    ):
        """
        Initialize token store

        Args:
            storage: Backend (defaults to MemoryStorage)
            keys: Well-known keys (defaults to StorageKeys())
        """
        self.logger = logging.getLogger("persistence.token_store")
        self.storage = storage if storage is not None else MemoryStorage()
        self.keys = keys or StorageKeys()
        self._known = frozenset(self.keys.all())

    # ------------------------------------------------------------------
    # Raw access over well-known keys
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[str]:
        """
        Read a well-known key

        Returns:
            Stored value, or None when absent

        Raises:
            KeyError: If key is not a session key
            StorageError: If the backend fails
        """
        self._check_key(key)
        return self.storage.get(key)

    def set(self, key: str, value: str) -> None:
        """Write a well-known key"""
        self._check_key(key)
        if not isinstance(value, str):
            raise TypeError(f"Stored values must be strings, got {type(value).__name__}")
        self.storage.set(key, value)

    def remove(self, key: str) -> None:
        """Remove a well-known key (no-op when absent)"""
        self._check_key(key)
        self.storage.remove(key)

    # ------------------------------------------------------------------
    # Session slots
    # ------------------------------------------------------------------

    def access_token(self) -> Optional[str]:
        return self.get(self.keys.access_token)

    def refresh_token(self) -> Optional[str]:
        return self.get(self.keys.refresh_token)

    def save_tokens(self, access_token: str, refresh_token: str) -> None:
        """Write both tokens before returning"""
        self.set(self.keys.access_token, access_token)
        self.set(self.keys.refresh_token, refresh_token)
        self.logger.debug("Token pair stored")

    def cached_user(self) -> Optional[Dict[str, Any]]:
        """
        Cached user-profile snapshot

        Returns:
            Snapshot dict, or None when absent or unreadable
        """
        raw = self.get(self.keys.cached_user)
        if raw is None:
            return None
        try:
            snapshot = json.loads(raw)
        except (TypeError, ValueError):
            self.logger.warning("Cached user snapshot is not valid JSON, ignoring")
            return None
        if not isinstance(snapshot, dict):
            self.logger.warning("Cached user snapshot is not an object, ignoring")
            return None
        return snapshot

    def save_cached_user(self, snapshot: Dict[str, Any]) -> None:
        self.set(self.keys.cached_user, json.dumps(snapshot, separators=(",", ":")))

    def clear(self) -> None:
        """Remove every session key"""
        self.storage.remove_many(self.keys.all())
        self.logger.debug("Session keys cleared")

    def _check_key(self, key: str) -> None:
        if key not in self._known:
            raise KeyError(f"Not a session key: {key!r}")
