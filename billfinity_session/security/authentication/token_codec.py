"""
Token Codec - Mint and verify session tokens

Module: security.authentication.token_codec
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial implementation
  - Three-segment HS256 tokens (header.payload.signature)
  - iat/exp/iss stamped at mint time
  - Access (24h) and refresh (7d) tokens
  - Total verification returning payload or None
  - Failure classification for diagnostics

ARCHITECTURE:
TokenCodec composes the encoder and the signer:
  mint:    payload -> stamp claims -> encode -> sign -> join
  inspect: split -> verify signature -> decode -> check expiry -> check kind

verify() never raises. Every rejection (bad structure, bad encoding, bad
signature, expired, wrong kind) collapses to None; inspect() reports which
one happened.

SECURITY NOTES:
- Minting and verifying happen on the same untrusted client
- The secret is bundled with the client, so anyone who can read it can
  forge tokens. This is tamper evidence, not authentication
- A token stays valid until exp; there is no revocation list
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Any

from . import encoder, signer
from .encoder import MalformedEncoding
from ...core.clock import Clock, SystemClock
from ...core.config import SessionConfig
from ...core.constants import (
    TOKEN_HEADER,
    TOKEN_DELIMITER,
    TOKEN_SEGMENTS,
    CLAIM_ISSUED_AT,
    CLAIM_EXPIRES_AT,
    CLAIM_ISSUER,
    CLAIM_TYPE,
    CLAIM_USER_ID,
    RESERVED_CLAIMS,
    REFRESH_TOKEN_TYPE,
    DEFAULT_SECRET_KEY,
    DEFAULT_ISSUER,
    ACCESS_TOKEN_TTL,
    REFRESH_TOKEN_TTL,
    MIN_SECRET_LENGTH,
)


class TokenFailure(str, Enum):
    """Why a presented token was rejected"""

    MALFORMED_ENCODING = "malformed_encoding"
    STRUCTURAL_MISMATCH = "structural_mismatch"
    SIGNATURE_MISMATCH = "signature_mismatch"
    EXPIRED = "expired"
    WRONG_TOKEN_TYPE = "wrong_token_type"


class TokenKind(str, Enum):
    """Which kind of token a caller expects"""

    ANY = "any"
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of inspecting a token"""

    payload: Optional[Dict[str, Any]] = None
    failure: Optional[TokenFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class TokenCodec:
    """
    Mints and verifies HS256 session tokens.

    Tokens are standard compact JWTs, so any HS256 library holding the same
    secret can read them.
    """

    def __init__(
        self,
        secret_key: str = DEFAULT_SECRET_KEY,
        issuer: str = DEFAULT_ISSUER,
        access_ttl: int = ACCESS_TOKEN_TTL,
        refresh_ttl: int = REFRESH_TOKEN_TTL,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize codec

        Args:
            secret_key: Shared HMAC secret
            issuer: iss claim value
            access_ttl: Access token TTL in seconds
            refresh_ttl: Refresh token TTL in seconds
            clock: Time source (defaults to wall clock)

        Raises:
            ValueError: If secret_key empty or a TTL is negative
        """
        if not secret_key:
            raise ValueError("secret_key required")
        _check_ttl(access_ttl)
        _check_ttl(refresh_ttl)

        self.logger = logging.getLogger("security.token_codec")
        self.secret_key = secret_key
        self.issuer = issuer
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.clock = clock or SystemClock()

        self._header_segment = encoder.encode(TOKEN_HEADER)

        if len(secret_key) < MIN_SECRET_LENGTH:
            self.logger.warning(
                f"Secret key shorter than {MIN_SECRET_LENGTH} characters"
            )

        self.logger.debug(
            f"TokenCodec initialized (iss={issuer}, "
            f"access_ttl={access_ttl}s, refresh_ttl={refresh_ttl}s)"
        )

    @classmethod
    def from_config(cls, config: SessionConfig, clock: Optional[Clock] = None) -> "TokenCodec":
        """Build a codec from a SessionConfig"""
        return cls(
            secret_key=config.secret_key,
            issuer=config.issuer,
            access_ttl=config.access_ttl,
            refresh_ttl=config.refresh_ttl,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Minting
    # ------------------------------------------------------------------

    def mint(self, payload: Dict[str, Any], ttl_seconds: int) -> str:
        """
        Stamp, encode and sign a payload

        Caller-supplied iat/exp/iss are discarded and replaced.

        Args:
            payload: Claims (JSON-serializable dict)
            ttl_seconds: Lifetime in seconds (0 allowed)

        Returns:
            Token string

        Raises:
            ValueError: If ttl_seconds is negative or not an int
            TypeError: If payload is not a JSON-serializable dict
        """
        _check_ttl(ttl_seconds)
        if not isinstance(payload, dict):
            raise TypeError(f"Payload must be a dict, got {type(payload).__name__}")

        claims = {k: v for k, v in payload.items() if k not in RESERVED_CLAIMS}
        iat = self.clock.now()
        claims[CLAIM_ISSUED_AT] = iat
        claims[CLAIM_EXPIRES_AT] = iat + ttl_seconds
        claims[CLAIM_ISSUER] = self.issuer

        payload_segment = encoder.encode(claims)
        message = signer.signing_input(self._header_segment, payload_segment)
        signature = signer.sign(message, self.secret_key)

        return TOKEN_DELIMITER.join((self._header_segment, payload_segment, signature))

    def mint_access(self, claims: Dict[str, Any]) -> str:
        """Mint an access token with the configured access TTL"""
        return self.mint(claims, self.access_ttl)

    def mint_refresh(self, user_id: Any) -> str:
        """
        Mint a refresh token for a user

        Args:
            user_id: Opaque identity reference

        Returns:
            Token whose payload is {userId, type: "refresh", iat, exp, iss}
        """
        if user_id is None or user_id == "":
            raise ValueError("user_id required")
        return self.mint(
            {CLAIM_USER_ID: user_id, CLAIM_TYPE: REFRESH_TOKEN_TYPE},
            self.refresh_ttl,
        )

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def inspect(self, token: Any, kind: TokenKind = TokenKind.ANY) -> VerificationResult:
        """
        Classify a presented token

        Args:
            token: Candidate token (any value; non-strings are rejected)
            kind: Expected token kind

        Returns:
            VerificationResult with payload on success, failure otherwise
        """
        # Well-formed segments are base64url, so always ASCII
        if not isinstance(token, str) or not token.isascii():
            return VerificationResult(failure=TokenFailure.STRUCTURAL_MISMATCH)

        parts = token.split(TOKEN_DELIMITER)
        if len(parts) != TOKEN_SEGMENTS or not all(parts):
            return VerificationResult(failure=TokenFailure.STRUCTURAL_MISMATCH)

        header_segment, payload_segment, signature = parts

        message = signer.signing_input(header_segment, payload_segment)
        if not signer.verify(message, self.secret_key, signature):
            return VerificationResult(failure=TokenFailure.SIGNATURE_MISMATCH)

        try:
            payload = encoder.decode(payload_segment)
        except MalformedEncoding:
            return VerificationResult(failure=TokenFailure.MALFORMED_ENCODING)

        exp = payload.get(CLAIM_EXPIRES_AT)
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return VerificationResult(failure=TokenFailure.MALFORMED_ENCODING)

        if exp < self.clock.now():
            return VerificationResult(failure=TokenFailure.EXPIRED)

        is_refresh = payload.get(CLAIM_TYPE) == REFRESH_TOKEN_TYPE
        if kind is TokenKind.REFRESH and not is_refresh:
            return VerificationResult(failure=TokenFailure.WRONG_TOKEN_TYPE)
        if kind is TokenKind.ACCESS and is_refresh:
            return VerificationResult(failure=TokenFailure.WRONG_TOKEN_TYPE)

        return VerificationResult(payload=payload)

    def verify(self, token: Any) -> Optional[Dict[str, Any]]:
        """
        Verify structure, signature and expiry

        Returns:
            Decoded payload, or None if the token is rejected for any reason
        """
        return self._checked(token, TokenKind.ANY)

    def verify_access(self, token: Any) -> Optional[Dict[str, Any]]:
        """Like verify(), but refresh tokens are rejected"""
        return self._checked(token, TokenKind.ACCESS)

    def verify_refresh(self, token: Any) -> Optional[Dict[str, Any]]:
        """Like verify(), but only tokens with type == "refresh" pass"""
        return self._checked(token, TokenKind.REFRESH)

    def is_expired(self, token: Any) -> bool:
        """True unless the token currently verifies"""
        return self.verify(token) is None

    def decode_unverified(self, token: Any) -> Optional[Dict[str, Any]]:
        """
        Decode payload WITHOUT signature or expiry checks (diagnostics only)

        Returns:
            Payload dict, or None if the token is not decodable
        """
        if not isinstance(token, str) or not token.isascii():
            return None
        parts = token.split(TOKEN_DELIMITER)
        if len(parts) != TOKEN_SEGMENTS:
            return None
        try:
            return encoder.decode(parts[1])
        except MalformedEncoding:
            return None

    def _checked(self, token: Any, kind: TokenKind) -> Optional[Dict[str, Any]]:
        result = self.inspect(token, kind)
        if not result.ok:
            self.logger.debug(f"Token rejected ({result.failure.value}, kind={kind.value})")
            return None
        return result.payload


def _check_ttl(ttl: Any) -> None:
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0:
        raise ValueError(f"TTL must be a non-negative integer, got {ttl!r}")
