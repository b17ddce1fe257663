"""
Signer - HMAC-SHA256 integrity tag over encoded segments

Module: security.authentication.signer
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial implementation
  - HS256 via PyJWT's HMACAlgorithm
  - Tag rendered as base64url, same as a JWT signature segment

SECURITY NOTES:
- The message is always "<header>.<payload>" as encoded text, never the raw
  payload, so any change in either segment changes the tag
- Verification recomputes the tag and compares with hmac.compare_digest
- The secret lives in the client; this gives tamper evidence only
"""

import hmac
from typing import Union

from jwt.algorithms import HMACAlgorithm
from jwt.utils import base64url_encode

from ...core.constants import TOKEN_DELIMITER

_HS256 = HMACAlgorithm(HMACAlgorithm.SHA256)


def signing_input(header_segment: str, payload_segment: str) -> str:
    """Message that gets signed: the two encoded segments joined"""
    return f"{header_segment}{TOKEN_DELIMITER}{payload_segment}"


def sign(message: str, secret: Union[str, bytes]) -> str:
    """
    Compute the integrity tag for a message

    Args:
        message: Delimiter-joined header and payload segments
        secret: Shared secret

    Returns:
        base64url HMAC-SHA256 tag (43 characters)
    """
    key = _HS256.prepare_key(secret)
    digest = _HS256.sign(message.encode("utf-8"), key)
    return base64url_encode(digest).decode("ascii")


def verify(message: str, secret: Union[str, bytes], tag: str) -> bool:
    """
    Recompute the tag and compare it with the presented one

    Returns:
        True if tags are identical
    """
    if not isinstance(tag, str) or not tag or not tag.isascii():
        return False
    try:
        expected = sign(message, secret)
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(expected.encode("ascii"), tag.encode("ascii"))


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import unittest

    class TestSigner(unittest.TestCase):
        """Test suite for signer"""

        secret = "test-secret-key-at-least-32-characters-long!!!!"

        def test_deterministic(self):
            """Test identical inputs give identical tags"""
            msg = signing_input("aGVhZGVy", "cGF5bG9hZA")
            self.assertEqual(sign(msg, self.secret), sign(msg, self.secret))

        def test_fixed_length(self):
            """Test tag is 32 bytes base64url-encoded"""
            self.assertEqual(len(sign("x.y", self.secret)), 43)

        def test_secret_changes_tag(self):
            """Test different secrets give different tags"""
            self.assertNotEqual(sign("x.y", self.secret), sign("x.y", self.secret + "?"))

        def test_verify(self):
            """Test verify accepts own tag and rejects others"""
            tag = sign("x.y", self.secret)
            self.assertTrue(verify("x.y", self.secret, tag))
            self.assertFalse(verify("x.z", self.secret, tag))
            self.assertFalse(verify("x.y", self.secret, ""))

    unittest.main()
