"""Credential resolution for outgoing API calls.

Bearer auth hands back the configured token. PAT auth exchanges the
personal access token for a bearer token via the login endpoint once per
user and caches the result for the life of the provider.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .config import DEFAULT_LOGIN_URL
from .errors import TransportError, UnsupportedAuthType

logger = logging.getLogger(__name__)

SUPPORTED_AUTH_TYPES = ("bearer", "pat")


class TokenCache:
    """Bearer tokens keyed by identity. Entries never expire on their own."""

    def __init__(self) -> None:
        self._tokens: dict[str, str] = {}

    def get(self, identity: str) -> str | None:
        return self._tokens.get(identity)

    def set(self, identity: str, token: str) -> None:
        self._tokens[identity] = token

    def pop(self, identity: str) -> str | None:
        return self._tokens.pop(identity, None)

    def __contains__(self, identity: object) -> bool:
        return identity in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)


class AuthProvider:
    def __init__(
        self,
        auth: Any,
        client: httpx.AsyncClient,
        login_url: str = DEFAULT_LOGIN_URL,
        cache: TokenCache | None = None,
    ) -> None:
        if auth is not None and getattr(auth, "type", None) not in SUPPORTED_AUTH_TYPES:
            raise UnsupportedAuthType(str(getattr(auth, "type", None)))
        self.auth = auth
        self.login_url = login_url
        self.cache = cache if cache is not None else TokenCache()
        self._client = client
        self._pending: dict[str, asyncio.Task[str]] = {}

    @property
    def is_pat(self) -> bool:
        return self.auth is not None and self.auth.type == "pat"

    async def authenticate(self, identity: str | None = None) -> str:
        """Return a bearer token, or "" when no credentials are configured.

        ``identity`` is the namespace the call targets. PAT tokens are always
        issued to the configured username, so it only shows up in the log.
        """
        if self.auth is None:
            return ""
        logger.debug("Authenticating with %s", self.auth.type)
        if self.auth.type == "bearer":
            return self.auth.token or ""
        if self.auth.type == "pat":
            return await self._authenticate_pat(identity)
        raise UnsupportedAuthType(str(self.auth.type))

    def invalidate(self, identity: str | None = None) -> None:
        """Forget the cached token so the next call logs in again."""
        username = identity or getattr(self.auth, "username", None)
        if username and self.cache.pop(username) is not None:
            logger.info("Dropped cached token for %s", username)

    async def _authenticate_pat(self, identity: str | None) -> str:
        username = self.auth.username
        secret = self.auth.token
        if not username or not secret:
            logger.warning("No username or token provided for PAT auth")
            return ""
        if identity and identity != username:
            logger.debug("Calling namespace %s as %s", identity, username)

        cached = self.cache.get(username)
        if cached:
            return cached

        # concurrent misses for one user share a single login call
        task = self._pending.get(username)
        if task is None:
            task = asyncio.ensure_future(self._login(username, secret))
            self._pending[username] = task
            task.add_done_callback(lambda _: self._pending.pop(username, None))
        # a cancelled waiter must not cancel the login other callers share
        token = await asyncio.shield(task)
        self.cache.set(username, token)
        return token

    async def _login(self, username: str, secret: str) -> str:
        logger.info("Authenticating PAT for %s", username)
        try:
            response = await self._client.post(
                self.login_url, json={"username": username, "password": secret}
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to authenticate PAT for {username}: {e}") from e

        if response.is_error:
            raise TransportError(
                f"Failed to authenticate PAT for {username}: "
                f"{response.status_code} {response.reason_phrase}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(f"Login response for {username} is not JSON") from e
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise TransportError(f"Login response for {username} has no token")
        return token
