"""
Encoder - Payload <-> token segment

Module: security.authentication.encoder
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial implementation
  - Compact JSON + base64url (no padding), same as JWT segments
  - MalformedEncoding on any decode failure

ARCHITECTURE:
encode() is deterministic for a given dict (insertion order preserved).
decode() accepts only segments that yield a JSON object.
"""

import json
from typing import Dict, Any

from jwt.utils import base64url_encode, base64url_decode


class TokenError(Exception):
    """Base token error"""
    pass


class MalformedEncoding(TokenError):
    """Segment is not a base64url-encoded JSON object"""
    pass


def encode(payload: Dict[str, Any]) -> str:
    """
    Serialize a payload to a token segment

    Args:
        payload: JSON-serializable dict

    Returns:
        base64url text without padding

    Raises:
        TypeError: If payload is not a dict or holds non-JSON values
    """
    if not isinstance(payload, dict):
        raise TypeError(f"Payload must be a dict, got {type(payload).__name__}")

    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return base64url_encode(raw.encode("utf-8")).decode("ascii")


def decode(segment: str) -> Dict[str, Any]:
    """
    Parse a token segment back into a payload

    Args:
        segment: Text produced by encode()

    Returns:
        Decoded dict

    Raises:
        MalformedEncoding: If segment is not valid base64url JSON object
    """
    if not isinstance(segment, str) or not segment:
        raise MalformedEncoding("Segment must be a non-empty string")

    try:
        raw = base64url_decode(segment)
        payload = json.loads(raw.decode("utf-8"))
    except ValueError as e:
        # binascii.Error, UnicodeError and JSONDecodeError are all ValueErrors
        raise MalformedEncoding(f"Cannot decode segment: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedEncoding(
            f"Segment holds {type(payload).__name__}, expected object"
        )

    return payload


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import unittest

    class TestEncoder(unittest.TestCase):
        """Test suite for encoder"""

        def test_round_trip(self):
            """Test decode(encode(p)) == p"""
            payload = {"userId": "u1", "roles": ["admin"], "n": 3, "nested": {"a": None}}
            self.assertEqual(decode(encode(payload)), payload)

        def test_url_safe(self):
            """Test output has no padding or +/ characters"""
            segment = encode({"data": "??>>~~" * 7})
            for ch in "=+/":
                self.assertNotIn(ch, segment)

        def test_garbage_raises(self):
            """Test garbage input raises MalformedEncoding"""
            for bad in ["", "%%%", "a", "bm90IGpzb24", encode({"a": 1})[:-3] + "@@@"]:
                with self.assertRaises(MalformedEncoding):
                    decode(bad)

        def test_non_object_raises(self):
            """Test JSON that is not an object is rejected"""
            segment = base64url_encode(b"[1, 2]").decode("ascii")
            with self.assertRaises(MalformedEncoding):
                decode(segment)

    unittest.main()
