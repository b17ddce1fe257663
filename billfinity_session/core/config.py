"""
Session Configuration

Module: core.config
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial implementation
  - SessionConfig carries secret, issuer and TTLs
  - StorageKeys groups the well-known persistence keys
  - Environment overrides

ARCHITECTURE:
Configuration is built once and injected into TokenCodec and TokenStore.
Nothing reads module-level state at call time, so several sessions with
different secrets can coexist in one process.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Mapping, Tuple

from .constants import (
    DEFAULT_SECRET_KEY,
    DEFAULT_ISSUER,
    ACCESS_TOKEN_TTL,
    REFRESH_TOKEN_TTL,
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    CACHED_USER_KEY,
    ENV_SECRET_KEY,
    ENV_ISSUER,
    ENV_ACCESS_TTL,
    ENV_REFRESH_TTL,
)


@dataclass(frozen=True)
class StorageKeys:
    """
    Keys a session owns within one storage scope.

    Attributes:
        access_token: Key of the access token
        refresh_token: Key of the refresh token
        cached_user: Key of the cached user-profile snapshot
        auxiliary: Extra session-derived keys wiped on logout
    """

    access_token: str = ACCESS_TOKEN_KEY
    refresh_token: str = REFRESH_TOKEN_KEY
    cached_user: str = CACHED_USER_KEY
    auxiliary: Tuple[str, ...] = ()

    def __post_init__(self):
        keys = self.all()
        if any(not k or not isinstance(k, str) for k in keys):
            raise ValueError("Storage keys must be non-empty strings")
        if len(set(keys)) != len(keys):
            raise ValueError(f"Storage keys must be distinct: {keys}")

    def all(self) -> Tuple[str, ...]:
        """Every key, in removal order"""
        return (
            self.access_token,
            self.refresh_token,
            self.cached_user,
        ) + tuple(self.auxiliary)


@dataclass(frozen=True)
class SessionConfig:
    """
    Session token configuration

    Attributes:
        secret_key: Shared HMAC secret (bundled with the client)
        issuer: Value stamped into the iss claim
        access_ttl: Access token lifetime in seconds
        refresh_ttl: Refresh token lifetime in seconds
        keys: Storage keys for this session scope
    """

    secret_key: str = DEFAULT_SECRET_KEY
    issuer: str = DEFAULT_ISSUER
    access_ttl: int = ACCESS_TOKEN_TTL
    refresh_ttl: int = REFRESH_TOKEN_TTL
    keys: StorageKeys = field(default_factory=StorageKeys)

    def __post_init__(self):
        if not self.secret_key:
            raise ValueError("secret_key required")
        if not self.issuer:
            raise ValueError("issuer required")
        for name in ("access_ttl", "refresh_ttl"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SessionConfig":
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read (defaults to os.environ)

        Returns:
            SessionConfig with overrides applied

        Raises:
            ValueError: If a TTL variable is not an integer
        """
        env = os.environ if environ is None else environ
        config = cls()

        overrides = {}
        if env.get(ENV_SECRET_KEY):
            overrides["secret_key"] = env[ENV_SECRET_KEY]
        if env.get(ENV_ISSUER):
            overrides["issuer"] = env[ENV_ISSUER]
        for var, name in ((ENV_ACCESS_TTL, "access_ttl"), (ENV_REFRESH_TTL, "refresh_ttl")):
            raw = env.get(var)
            if raw:
                try:
                    overrides[name] = int(raw)
                except ValueError as e:
                    raise ValueError(f"{var} must be an integer, got {raw!r}") from e

        return replace(config, **overrides) if overrides else config
