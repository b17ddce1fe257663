"""
Billfinity Session

Client-side session tokens for the Billfinity billing app: mint, sign,
verify, store and refresh a JWT-shaped credential without a server.

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial project setup
  - Token codec (HS256, base64url JSON segments)
  - Token store over pluggable key-value storage
  - Session manager (login, refresh, logout)
  - Command-line entry point

ARCHITECTURE:
- Layer 1 : Encoder, Signer
- Layer 2 : TokenCodec
- Layer 3 : TokenStore (MemoryStorage, JSONFileStorage)
- Layer 4 : SessionManager

SECURITY NOTES:
- The signing secret is bundled with the client
- Tokens are tamper-evident, not unforgeable
- Never a substitute for server-side authorization
"""

__version__ = "0.1.0-alpha"
__author__ = "Billfinity Development Team"

from .core.clock import Clock, SystemClock, ManualClock
from .core.config import SessionConfig, StorageKeys
from .security.authentication import (
    TokenCodec,
    TokenFailure,
    TokenKind,
    VerificationResult,
    MalformedEncoding,
)
from .persistence import (
    KeyValueStorage,
    MemoryStorage,
    JSONFileStorage,
    StorageError,
    TokenStore,
)
from .session import SessionManager, SessionError, TokenPair

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "SessionConfig",
    "StorageKeys",
    "TokenCodec",
    "TokenFailure",
    "TokenKind",
    "VerificationResult",
    "MalformedEncoding",
    "KeyValueStorage",
    "MemoryStorage",
    "JSONFileStorage",
    "StorageError",
    "TokenStore",
    "SessionManager",
    "SessionError",
    "TokenPair",
]
