"""
Session module - Client session lifecycle

Provides:
- SessionManager: login, current payload, refresh, logout
- TokenPair: minted access/refresh pair
- SessionError: login could not be persisted
"""

from .session_manager import SessionManager, SessionError, TokenPair

__all__ = [
    "SessionManager",
    "SessionError",
    "TokenPair",
]
