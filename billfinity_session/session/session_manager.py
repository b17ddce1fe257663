"""
Session Manager - Login, verification-on-read, refresh and logout

Module: session.session_manager
Date: 2025-11-23
Version: 0.1.0-alpha

CHANGELOG:
[2025-11-23 v0.1.0-alpha] Initial implementation
  - Login mints and stores an access/refresh pair
  - Reads verify the stored access token
  - Expired access tokens are replaced from a valid refresh token
  - Logout wipes every session key

ARCHITECTURE:
SessionManager is the only writer of the TokenStore.
  login:   payload -> TokenCodec (access + refresh) -> TokenStore
  read:    TokenStore -> TokenCodec.verify_access -> payload | None
  refresh: TokenStore -> TokenCodec.verify_refresh -> mint access -> TokenStore
  logout:  TokenStore.clear()

Every verification failure means "no session". Storage faults on reads,
refresh and logout are logged and reported the same way; login raises
SessionError so the caller can retry.

SECURITY NOTES:
- All tokens are minted and verified on the client with a bundled secret
- A refreshed access token carries only userId unless a claims loader
  supplies the full claim set from a trusted source
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..core.clock import Clock
from ..core.config import SessionConfig
from ..core.constants import CLAIM_USER_ID, CLAIM_TYPE, REFRESH_TOKEN_TYPE
from ..persistence.storage import KeyValueStorage, StorageError
from ..persistence.token_store import TokenStore
from ..security.authentication.token_codec import TokenCodec


ClaimsLoader = Callable[[Any], Optional[Dict[str, Any]]]


class SessionError(Exception):
    """Session could not be established"""
    pass


@dataclass
class TokenPair:
    """Access and refresh token pair"""
    access_token: str
    refresh_token: str


class SessionManager:
    """
    Drives the client session lifecycle.

    Args:
        codec: Token codec (secret, issuer, TTLs, clock)
        store: Token store (defaults to in-memory storage)
        claims_loader: Optional callable(user_id) -> claims, used to rebuild
            the full claim set when an access token is refreshed
    """

    def __init__(
        self,
        codec: TokenCodec,
        store: Optional[TokenStore] = None,
        claims_loader: Optional[ClaimsLoader] = None,
    ):
        self.logger = logging.getLogger("session.manager")
        self.codec = codec
        self.store = store or TokenStore()
        self.claims_loader = claims_loader

    @classmethod
    def from_config(
        cls,
        config: SessionConfig,
        storage: Optional[KeyValueStorage] = None,
        clock: Optional[Clock] = None,
        claims_loader: Optional[ClaimsLoader] = None,
    ) -> "SessionManager":
        """Wire codec and store from one SessionConfig"""
        return cls(
            TokenCodec.from_config(config, clock=clock),
            TokenStore(storage, config.keys),
            claims_loader=claims_loader,
        )

    def login(
        self,
        payload: Dict[str, Any],
        user: Optional[Dict[str, Any]] = None,
    ) -> TokenPair:
        """
        Start a session

        Args:
            payload: Access token claims; must include userId
            user: Optional user-profile snapshot to cache

        Returns:
            TokenPair that was stored

        Raises:
            ValueError: If payload has no userId or is typed as a refresh token
            SessionError: If the session could not be persisted
        """
        if not isinstance(payload, dict) or payload.get(CLAIM_USER_ID) in (None, ""):
            raise ValueError(f"Login payload requires {CLAIM_USER_ID}")
        if payload.get(CLAIM_TYPE) == REFRESH_TOKEN_TYPE:
            raise ValueError(f"Login payload cannot carry {CLAIM_TYPE}={REFRESH_TOKEN_TYPE!r}")

        user_id = payload[CLAIM_USER_ID]
        pair = TokenPair(
            access_token=self.codec.mint_access(payload),
            refresh_token=self.codec.mint_refresh(user_id),
        )

        try:
            self.store.save_tokens(pair.access_token, pair.refresh_token)
            if user is not None:
                self.store.save_cached_user(user)
            else:
                self.store.remove(self.store.keys.cached_user)
        except StorageError as e:
            self.logger.error(f"Login for {user_id} could not be persisted: {e}")
            self._discard_partial_session()
            raise SessionError(f"Session storage unavailable: {e}") from e

        self.logger.info(f"Session started for {user_id}")
        return pair

    def current_payload(self) -> Optional[Dict[str, Any]]:
        """
        Claims of the stored access token

        Returns:
            Payload, or None when there is no valid access token
        """
        try:
            token = self.store.access_token()
        except StorageError as e:
            self.logger.warning(f"Cannot read access token: {e}")
            return None
        if token is None:
            return None
        return self.codec.verify_access(token)

    def refresh_if_needed(self) -> Optional[str]:
        """
        Make sure a valid access token is stored

        Returns:
            The stored access token if it still verifies, a newly minted one
            if the refresh token allowed it, otherwise None
        """
        try:
            access = self.store.access_token()
            if access is not None and self.codec.verify_access(access) is not None:
                return access

            refresh = self.store.refresh_token()
            if refresh is None:
                self.logger.debug("No refresh token stored")
                return None

            claims = self.codec.verify_refresh(refresh)
            if claims is None:
                self.logger.info("Refresh token rejected, session is stale")
                return None

            user_id = claims.get(CLAIM_USER_ID)
            if user_id in (None, ""):
                self.logger.warning("Refresh token carries no userId")
                return None

            new_access = self.codec.mint_access(self._claims_for(user_id))
            self.store.save_tokens(new_access, refresh)
        except StorageError as e:
            self.logger.warning(f"Refresh aborted, storage unavailable: {e}")
            return None

        self.logger.info(f"Access token refreshed for {user_id}")
        return new_access

    def access_token(self) -> Optional[str]:
        """Stored access token if it currently verifies"""
        try:
            token = self.store.access_token()
        except StorageError as e:
            self.logger.warning(f"Cannot read access token: {e}")
            return None
        if token is None or self.codec.verify_access(token) is None:
            return None
        return token

    def is_authenticated(self) -> bool:
        return self.current_payload() is not None

    def cached_user(self) -> Optional[Dict[str, Any]]:
        """Cached user snapshot, only while the session is active"""
        if not self.is_authenticated():
            return None
        try:
            return self.store.cached_user()
        except StorageError as e:
            self.logger.warning(f"Cannot read cached user: {e}")
            return None

    def logout(self) -> None:
        """Remove every session key; safe on an empty store"""
        try:
            self.store.clear()
        except StorageError as e:
            self.logger.error(f"Logout could not clear storage: {e}")
            return
        self.logger.info("Session cleared")

    def _claims_for(self, user_id: Any) -> Dict[str, Any]:
        claims = None
        if self.claims_loader is not None:
            claims = self.claims_loader(user_id)
        if not claims:
            return {CLAIM_USER_ID: user_id}
        claims = dict(claims)
        if claims.get(CLAIM_TYPE) == REFRESH_TOKEN_TYPE:
            del claims[CLAIM_TYPE]
        claims[CLAIM_USER_ID] = user_id
        return claims

    def _discard_partial_session(self) -> None:
        try:
            self.store.clear()
        except StorageError as e:
            self.logger.error(f"Partial session left in storage: {e}")
