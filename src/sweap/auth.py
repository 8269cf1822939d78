"""OAuth2 client credentials authentication for httpx.

The Sweap API accepts bearer tokens issued by its Keycloak realm. Tokens
are fetched with the client credentials grant and reused until shortly
before they expire.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncGenerator, Generator

import httpx

from sweap.exceptions import SweapAuthenticationError
from sweap.logging import get_logger

logger = get_logger(__name__)

# Refresh tokens this many seconds before the server side expiry
EXPIRY_LEEWAY_SECONDS = 10.0


class ClientCredentialsAuth(httpx.Auth):
    """httpx auth flow implementing the OAuth2 client credentials grant.

    Usage:
        auth = ClientCredentialsAuth(client_id, client_secret, token_url)
        async with httpx.AsyncClient(auth=auth) as http:
            await http.get("https://api.sweap.io/core/v1/events")

    The token request is issued through the same client (and transport)
    as the API request it precedes. Concurrent requests share one token
    fetch. A 401 from the API triggers one token refresh and retry, unless
    another request already replaced the rejected token.
    """

    requires_response_body = True

    def __init__(self, client_id: str, client_secret: str, token_url: str) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._access_token: str | None = None
        self._expires_at: float = 0.0
        # Serializes token fetches across concurrent requests
        self._lock = asyncio.Lock()

    @property
    def token_url(self) -> str:
        return self._token_url

    @property
    def has_valid_token(self) -> bool:
        """Whether a cached token exists that is not about to expire."""
        return self._access_token is not None and time.monotonic() < self._expires_at

    def invalidate(self) -> None:
        """Drop the cached token so the next request fetches a new one."""
        self._access_token = None
        self._expires_at = 0.0

    def sync_auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        raise RuntimeError("ClientCredentialsAuth requires an httpx.AsyncClient")

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        if not self.has_valid_token:
            async with self._lock:
                # Another request may have fetched a token while we waited
                if not self.has_valid_token:
                    token_response = yield self._build_token_request()
                    self._update_token(token_response)

        sent_token = self._access_token
        request.headers["Authorization"] = f"Bearer {sent_token}"
        response = yield request

        if response.status_code == 401:
            async with self._lock:
                if self._access_token == sent_token:
                    logger.debug("API answered 401, refreshing access token")
                    self.invalidate()
                    token_response = yield self._build_token_request()
                    self._update_token(token_response)
            request.headers["Authorization"] = f"Bearer {self._access_token}"
            yield request

    def _build_token_request(self) -> httpx.Request:
        return httpx.Request(
            "POST",
            self._token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            },
            headers={"Accept": "application/json"},
        )

    def _update_token(self, response: httpx.Response) -> None:
        """Store the token from a token endpoint response.

        Raises:
            SweapAuthenticationError: If the endpoint refused the credentials
                or answered without an access token.
        """
        if response.status_code != 200:
            raise SweapAuthenticationError(
                f"authorization at endpoint {self._token_url} failed "
                f"({response.status_code}). Check credentials"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SweapAuthenticationError(
                f"token endpoint {self._token_url} returned no JSON document"
            ) from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise SweapAuthenticationError(
                f"token endpoint {self._token_url} returned no access token"
            )

        expires_in = float(payload.get("expires_in") or 0)
        self._access_token = token
        if expires_in > 0:
            self._expires_at = time.monotonic() + max(expires_in - EXPIRY_LEEWAY_SECONDS, 0.0)
        else:
            # No expiry announced, keep the token until the API rejects it
            self._expires_at = float("inf")
        logger.debug("Obtained access token (expires_in={}s)", expires_in)
