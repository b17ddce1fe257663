"""
Authentication module - Session token encoding, signing and verification

Provides:
- encoder: payload <-> base64url JSON segment
- signer: HMAC-SHA256 tag over header.payload
- TokenCodec: mint/verify three-segment tokens
"""

from . import encoder, signer
from .encoder import TokenError, MalformedEncoding
from .token_codec import (
    TokenCodec,
    TokenFailure,
    TokenKind,
    VerificationResult,
)

__all__ = [
    "encoder",
    "signer",
    "TokenError",
    "MalformedEncoding",
    "TokenCodec",
    "TokenFailure",
    "TokenKind",
    "VerificationResult",
]
