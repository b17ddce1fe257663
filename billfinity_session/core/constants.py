"""
Constants for Billfinity Session

Module: core.constants
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial constants definition
  - Token wire format constants
  - Reserved claim names
  - Default TTLs
  - Storage key names
  - Environment variable names

SECURITY NOTES:
- DEFAULT_SECRET_KEY ships with the client and is therefore public
- Tokens built with it are tamper-evident, not unforgeable
- Never use these tokens for server-side authorization
"""

from typing import Final, Dict

# ============================================================================
# Token Wire Format
# ============================================================================

TOKEN_DELIMITER: Final[str] = "."
TOKEN_SEGMENTS: Final[int] = 3

ALGORITHM: Final[str] = "HS256"
TOKEN_FORMAT: Final[str] = "JWT"

# Header never varies per call
TOKEN_HEADER: Final[Dict[str, str]] = {"alg": ALGORITHM, "typ": TOKEN_FORMAT}

# ============================================================================
# Claims
# ============================================================================

CLAIM_ISSUED_AT: Final[str] = "iat"
CLAIM_EXPIRES_AT: Final[str] = "exp"
CLAIM_ISSUER: Final[str] = "iss"
CLAIM_TYPE: Final[str] = "type"
CLAIM_USER_ID: Final[str] = "userId"

# Claims stamped by the codec; caller values are overwritten on mint
RESERVED_CLAIMS: Final[tuple] = (CLAIM_ISSUED_AT, CLAIM_EXPIRES_AT, CLAIM_ISSUER)

REFRESH_TOKEN_TYPE: Final[str] = "refresh"

DEFAULT_ISSUER: Final[str] = "billfinity"

# ============================================================================
# Lifetimes (seconds)
# ============================================================================

ACCESS_TOKEN_TTL: Final[int] = 24 * 60 * 60       # 24 hours
REFRESH_TOKEN_TTL: Final[int] = 7 * 24 * 60 * 60  # 7 days

# ============================================================================
# Secret
# ============================================================================

DEFAULT_SECRET_KEY: Final[str] = "billfinity-client-secret-key-2024"
MIN_SECRET_LENGTH: Final[int] = 32

# ============================================================================
# Storage Keys
# ============================================================================

ACCESS_TOKEN_KEY: Final[str] = "billfinity_token"
REFRESH_TOKEN_KEY: Final[str] = "billfinity_refresh_token"
CACHED_USER_KEY: Final[str] = "billfinity_user"

DEFAULT_DATA_DIR: Final[str] = "./data"
DEFAULT_PROFILE: Final[str] = "default"

# ============================================================================
# Environment
# ============================================================================

ENV_SECRET_KEY: Final[str] = "BILLFINITY_SECRET_KEY"
ENV_ISSUER: Final[str] = "BILLFINITY_ISSUER"
ENV_ACCESS_TTL: Final[str] = "BILLFINITY_ACCESS_TTL"
ENV_REFRESH_TTL: Final[str] = "BILLFINITY_REFRESH_TTL"
ENV_DATA_DIR: Final[str] = "BILLFINITY_DATA_DIR"
