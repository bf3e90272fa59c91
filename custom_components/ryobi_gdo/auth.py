"""API key handling for the Ryobi cloud."""

from __future__ import annotations

from collections.abc import Mapping
import logging

from .const import LOGIN_ENDPOINT
from .exceptions import AuthenticationError
from .session import Credentials
from .transport import RyobiHttpClient

LOGGER = logging.getLogger(__name__)


class AuthManager:
    """Obtain and cache the API key."""

    def __init__(self, http: RyobiHttpClient, credentials: Credentials) -> None:
        """Initialize the auth manager."""
        self._http = http
        self.credentials = credentials

    async def async_ensure_api_key(self) -> str:
        """Return a trusted API key, logging in when the cached one expired."""
        store = self._http.store
        if store.api_key_valid():
            return store.api_key

        LOGGER.debug("Requesting API key for %s", self.credentials.email)
        reply = await self._http.request(
            "post",
            self._http.url(LOGIN_ENDPOINT),
            {
                "username": self.credentials.email,
                "password": self.credentials.password,
            },
        )
        result = reply.get("result") if isinstance(reply, Mapping) else None
        auth = result.get("auth") if isinstance(result, Mapping) else None
        api_key = auth.get("apiKey") if isinstance(auth, Mapping) else None
        if not api_key:
            raise AuthenticationError(
                f"Unauthorized -- check your ryobi username/password: {result}",
                result,
            )

        store.api_key = api_key
        return api_key
