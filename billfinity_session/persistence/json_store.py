"""
JSON Store - JSON file handling for profile storage

Module: persistence.json_store
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial implementation
  - Load/save a JSON object document
  - Automatic directory creation
  - Atomic writes

ARCHITECTURE:
JSONStore provides:
  - JSON serialization/deserialization of one object per file
  - Atomic writes (write to temp file, then move)
  - Owner-only file permissions
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional


class JSONStoreError(Exception):
    """Base JSON store error"""
    pass


class JSONStoreIOError(JSONStoreError):
    """File I/O error"""
    pass


class JSONStoreFormatError(JSONStoreError):
    """JSON format error"""
    pass


class JSONStore:
    """
    JSON-object file persistence.

    Handles:
    - File creation and permissions
    - Atomic writes (temp file + rename)
    - Automatic directory creation
    """

    def __init__(self, file_path: str, default_data: Optional[Dict[str, Any]] = None):
        """
        Initialize JSON store

        Args:
            file_path: Path to JSON file
            default_data: Default data structure if file doesn't exist

        Raises:
            JSONStoreIOError: If the directory or file cannot be created
        """
        self.logger = logging.getLogger(f"persistence.{self.__class__.__name__}")
        self.file_path = Path(file_path)
        self.default_data = default_data or {}

        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise JSONStoreIOError(f"Cannot create {self.file_path.parent}: {e}") from e

        if not self.file_path.exists():
            self._write_atomic(self.default_data)
            self.logger.info(f"Created new store: {self.file_path}")

    def load(self) -> Dict[str, Any]:
        """
        Load data from JSON file

        Returns:
            Parsed JSON object

        Raises:
            JSONStoreIOError: If file cannot be read
            JSONStoreFormatError: If JSON is invalid or not an object
        """
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            self.logger.warning(f"File not found, returning default data")
            return copy.deepcopy(self.default_data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise JSONStoreFormatError(f"Invalid JSON in {self.file_path}: {e}") from e
        except OSError as e:
            raise JSONStoreIOError(f"Failed to read {self.file_path}: {e}") from e

        if not isinstance(data, dict):
            raise JSONStoreFormatError(
                f"Expected JSON object in {self.file_path}, got {type(data).__name__}"
            )
        return data

    def save(self, data: Dict[str, Any]) -> None:
        """
        Save data to JSON file (atomic write)

        Raises:
            JSONStoreIOError: If write fails
        """
        self._write_atomic(data)

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        """
        Atomic write: write to temp file, then rename

        Raises:
            JSONStoreIOError: If write fails
        """
        temp_path = self.file_path.with_suffix('.tmp')
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)

            temp_path.replace(self.file_path)

            # rw-------
            self.file_path.chmod(0o600)
        except (OSError, TypeError, ValueError) as e:
            raise JSONStoreIOError(f"Failed to write {self.file_path}: {e}") from e


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import os
    import unittest
    import tempfile
    import shutil

    class TestJSONStore(unittest.TestCase):
        """Test suite for JSONStore"""

        def setUp(self):
            """Setup before each test"""
            self.test_dir = tempfile.mkdtemp()
            self.store_path = os.path.join(self.test_dir, "test.json")

        def tearDown(self):
            """Cleanup after each test"""
            if os.path.exists(self.test_dir):
                shutil.rmtree(self.test_dir)

        def test_initialization_creates_file(self):
            """Test initialization creates JSON file"""
            JSONStore(self.store_path)
            self.assertTrue(os.path.exists(self.store_path))

        def test_save_and_load(self):
            """Test saving and loading data"""
            store = JSONStore(self.store_path)
            store.save({"items": {"k": "v"}})
            self.assertEqual(store.load(), {"items": {"k": "v"}})

        def test_file_permissions(self):
            """Test file has restrictive permissions"""
            store = JSONStore(self.store_path)
            store.save({"data": "test"})
            mode = os.stat(self.store_path).st_mode & 0o777
            self.assertEqual(mode, 0o600)

        def test_invalid_json_raises_error(self):
            """Test invalid JSON raises error"""
            store = JSONStore(self.store_path)
            with open(self.store_path, 'w') as f:
                f.write("{invalid json}")
            with self.assertRaises(JSONStoreFormatError):
                store.load()

    unittest.main()
