"""
Persistence Tests

Module: tests.test_token_store
Date: 2025-11-23
Version: 0.1.0-alpha

DESCRIPTION:
Tests for storage backends, TokenStore and configuration:
- MemoryStorage and JSONFileStorage get/set/remove
- Profile scoping and persistence across instances
- Corrupted files surface as StorageError
- TokenStore key restriction, pair writes, cached user, clear
- SessionConfig validation and environment overrides
"""

import json
import logging
import os
import shutil
import tempfile
import unittest

from billfinity_session.core.config import SessionConfig, StorageKeys
from billfinity_session.persistence.json_store import JSONStore, JSONStoreFormatError
from billfinity_session.persistence.storage import (
    MemoryStorage,
    JSONFileStorage,
    StorageError,
    StorageUnavailableError,
)
from billfinity_session.persistence.token_store import TokenStore

logging.basicConfig(
    level=logging.WARNING,
    format="%(name)s - %(levelname)s - %(message)s"
)


class TestMemoryStorage(unittest.TestCase):
    """Test in-memory backend"""

    def test_get_missing_returns_none(self):
        """Test absent key gives None"""
        self.assertIsNone(MemoryStorage().get("nope"))

    def test_set_get_remove(self):
        """Test basic operations"""
        storage = MemoryStorage()
        storage.set("k", "v")
        self.assertEqual(storage.get("k"), "v")
        storage.remove("k")
        self.assertIsNone(storage.get("k"))
        storage.remove("k")  # idempotent
        self.assertEqual(len(storage), 0)


class TestJSONFileStorage(unittest.TestCase):
    """Test file backend"""

    def setUp(self):
        """Setup before each test"""
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Cleanup after each test"""
        if os.path.exists(self.test_dir):
            shutil.rmtree(self.test_dir)

    def test_creates_profile_file(self):
        """Test initialization creates <profile>.json"""
        storage = JSONFileStorage(self.test_dir, "alice")
        self.assertTrue(storage.file_path.exists())
        self.assertEqual(storage.file_path.name, "alice.json")

    def test_survives_new_instance(self):
        """Test values outlive the storage object"""
        JSONFileStorage(self.test_dir).set("billfinity_token", "abc")
        self.assertEqual(JSONFileStorage(self.test_dir).get("billfinity_token"), "abc")

    def test_profiles_are_isolated(self):
        """Test one profile does not see another's keys"""
        JSONFileStorage(self.test_dir, "alice").set("k", "alice-value")
        bob = JSONFileStorage(self.test_dir, "bob")
        self.assertIsNone(bob.get("k"))

    def test_remove_many(self):
        """Test removing several keys at once"""
        storage = JSONFileStorage(self.test_dir)
        for key in ("a", "b", "c"):
            storage.set(key, key)
        storage.remove_many(["a", "b", "missing"])
        self.assertIsNone(storage.get("a"))
        self.assertIsNone(storage.get("b"))
        self.assertEqual(storage.get("c"), "c")

    def test_file_permissions(self):
        """Test profile file is owner-only"""
        storage = JSONFileStorage(self.test_dir)
        storage.set("k", "v")
        mode = os.stat(storage.file_path).st_mode & 0o777
        self.assertEqual(mode, 0o600)

    def test_corrupted_file_raises_storage_error(self):
        """Test invalid JSON surfaces as StorageUnavailableError"""
        storage = JSONFileStorage(self.test_dir)
        with open(storage.file_path, "w") as f:
            f.write("{not json")
        with self.assertRaises(StorageUnavailableError):
            storage.get("k")
        self.assertTrue(issubclass(StorageUnavailableError, StorageError))

    def test_items_not_a_mapping(self):
        """Test a file without an items object reads as empty"""
        storage = JSONFileStorage(self.test_dir)
        with open(storage.file_path, "w") as f:
            json.dump({"items": ["x"]}, f)
        self.assertIsNone(storage.get("x"))
        storage.remove_many(["x"])
        self.assertEqual(storage.store.load(), {"items": {}})

    def test_set_over_non_mapping_items(self):
        """Test writing into a file whose items is not an object resets it"""
        storage = JSONFileStorage(self.test_dir)
        for bad in ("x", ["x"], None, 3):
            with self.subTest(items=bad):
                with open(storage.file_path, "w") as f:
                    json.dump({"items": bad}, f)
                storage.set("k", "v")
                self.assertEqual(storage.get("k"), "v")
                self.assertEqual(storage.store.load(), {"items": {"k": "v"}})

    def test_remove_many_resets_corrupted_file(self):
        """Test clearing an unparseable profile rewrites it empty"""
        storage = JSONFileStorage(self.test_dir)
        with open(storage.file_path, "w") as f:
            f.write("{corrupted")

        storage.remove_many(["k"])

        self.assertEqual(storage.store.load(), {"items": {}})
        storage.set("k", "v")
        self.assertEqual(storage.get("k"), "v")

    def test_invalid_profile_name(self):
        """Test path-like profile names are refused"""
        for name in ("", "..", "../evil", "a/b"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    JSONFileStorage(self.test_dir, name)

    def test_json_store_rejects_non_object(self):
        """Test JSONStore only loads JSON objects"""
        path = os.path.join(self.test_dir, "list.json")
        store = JSONStore(path)
        with open(path, "w") as f:
            f.write("[1, 2]")
        with self.assertRaises(JSONStoreFormatError):
            store.load()


class TestTokenStore(unittest.TestCase):
    """Test TokenStore"""

    def setUp(self):
        """Setup before each test"""
        self.storage = MemoryStorage()
        self.store = TokenStore(self.storage)

    def test_absent_tokens(self):
        """Test empty store reports absent"""
        self.assertIsNone(self.store.access_token())
        self.assertIsNone(self.store.refresh_token())
        self.assertIsNone(self.store.cached_user())

    def test_save_tokens(self):
        """Test both tokens written under their keys"""
        self.store.save_tokens("access", "refresh")
        self.assertEqual(self.storage.get("billfinity_token"), "access")
        self.assertEqual(self.storage.get("billfinity_refresh_token"), "refresh")
        self.assertEqual(self.store.get("billfinity_token"), "access")

    def test_unknown_key_refused(self):
        """Test keys outside the session are rejected"""
        with self.assertRaises(KeyError):
            self.store.get("authToken")
        with self.assertRaises(KeyError):
            self.store.set("other", "x")
        with self.assertRaises(KeyError):
            self.store.remove("other")

    def test_values_must_be_strings(self):
        """Test non-string values are refused"""
        with self.assertRaises(TypeError):
            self.store.set("billfinity_token", 123)

    def test_cached_user(self):
        """Test user snapshot round trip"""
        self.store.save_cached_user({"id": 1, "role": "admin"})
        self.assertEqual(self.store.cached_user(), {"id": 1, "role": "admin"})

    def test_corrupted_cached_user(self):
        """Test unreadable snapshot reads as absent"""
        self.storage.set("billfinity_user", "{broken")
        self.assertIsNone(self.store.cached_user())
        self.storage.set("billfinity_user", "[1]")
        self.assertIsNone(self.store.cached_user())

    def test_clear_removes_only_session_keys(self):
        """Test clear wipes session keys and leaves others"""
        keys = StorageKeys(auxiliary=("billfinity_cart",))
        store = TokenStore(self.storage, keys)
        self.storage.set("unrelated", "keep")
        store.save_tokens("a", "r")
        store.save_cached_user({"id": 1})
        store.set("billfinity_cart", "[]")

        store.clear()
        store.clear()

        self.assertEqual(self.storage.keys(), ["unrelated"])

    def test_custom_keys(self):
        """Test configured key names are used"""
        keys = StorageKeys(access_token="at", refresh_token="rt", cached_user="cu")
        store = TokenStore(self.storage, keys)
        store.save_tokens("a", "r")
        self.assertEqual(self.storage.get("at"), "a")
        self.assertEqual(self.storage.get("rt"), "r")


class TestSessionConfig(unittest.TestCase):
    """Test configuration"""

    def test_defaults(self):
        """Test default values"""
        config = SessionConfig()
        self.assertEqual(config.access_ttl, 24 * 60 * 60)
        self.assertEqual(config.refresh_ttl, 7 * 24 * 60 * 60)
        self.assertEqual(config.issuer, "billfinity")
        self.assertEqual(
            config.keys.all(),
            ("billfinity_token", "billfinity_refresh_token", "billfinity_user"),
        )

    def test_invalid_values(self):
        """Test invalid configuration is refused"""
        with self.assertRaises(ValueError):
            SessionConfig(secret_key="")
        with self.assertRaises(ValueError):
            SessionConfig(access_ttl=-5)
        with self.assertRaises(ValueError):
            StorageKeys(access_token="same", refresh_token="same")

    def test_from_env(self):
        """Test environment overrides"""
        config = SessionConfig.from_env({
            "BILLFINITY_SECRET_KEY": "env-secret-key-that-is-long-enough-123",
            "BILLFINITY_ISSUER": "shop",
            "BILLFINITY_ACCESS_TTL": "60",
            "BILLFINITY_REFRESH_TTL": "600",
        })
        self.assertEqual(config.secret_key, "env-secret-key-that-is-long-enough-123")
        self.assertEqual(config.issuer, "shop")
        self.assertEqual(config.access_ttl, 60)
        self.assertEqual(config.refresh_ttl, 600)

    def test_from_env_empty(self):
        """Test empty environment gives defaults"""
        self.assertEqual(SessionConfig.from_env({}), SessionConfig())

    def test_from_env_bad_ttl(self):
        """Test non-integer TTL variable"""
        with self.assertRaises(ValueError):
            SessionConfig.from_env({"BILLFINITY_ACCESS_TTL": "soon"})


if __name__ == "__main__":
    unittest.main()
