"""HTTP transport for the Ryobi cloud."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp  # type: ignore
from aiohttp import hdrs
from aiohttp.client_exceptions import ServerConnectionError, ServerTimeoutError

from .const import HOST_URI
from .exceptions import MalformedResponseError, TransportError
from .session import ConnectionPolicy, SessionStore

LOGGER = logging.getLogger(__name__)


class RyobiHttpClient:
    """Send requests carrying the session cookies and collect new ones."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        store: SessionStore,
        policy: ConnectionPolicy,
    ) -> None:
        """Initialize the transport."""
        self.session = session
        self.store = store
        self.policy = policy

    @staticmethod
    def url(endpoint: str, scheme: str = "https") -> str:
        """Return the full URL for an endpoint."""
        return f"{scheme}://{HOST_URI}/{endpoint}"

    @property
    def ssl(self) -> bool:
        """Return the aiohttp ssl argument for this policy."""
        return self.policy.verify_ssl

    def headers(self) -> dict[str, str]:
        """Return request headers built from the session."""
        return {hdrs.COOKIE: self.store.cookie_header()}

    async def request(
        self, method: str, url: str, data: dict[str, str] | None = None
    ) -> Any:
        """Process an HTTP request and return the decoded JSON reply."""
        http_method = getattr(self.session, method)
        LOGGER.debug("Connecting to %s using %s", url, method)
        try:
            async with asyncio.timeout(self.policy.request_timeout):
                async with http_method(
                    url, data=data, headers=self.headers(), ssl=self.ssl
                ) as response:
                    self.store.merge(response.headers.getall(hdrs.SET_COOKIE, []))
                    raw_reply = await response.text()
                    status = response.status
        except (TimeoutError, ServerTimeoutError) as err:
            LOGGER.error("Timeout connecting to %s", url)
            raise TransportError(f"Timeout connecting to {url}") from err
        except ServerConnectionError as err:
            LOGGER.error("Problem connecting to server at %s", url)
            raise TransportError(f"Problem connecting to server at {url}") from err
        except aiohttp.ClientError as err:
            raise TransportError(f"Request to {url} failed: {err}") from err

        LOGGER.debug("Reply from %s: %s", url, raw_reply)
        if status in [404, 405, 500]:
            LOGGER.warning("HTTP Error: %s", raw_reply)
        try:
            return json.loads(raw_reply)
        except ValueError as err:
            LOGGER.warning("Reply was not in JSON format: %s", raw_reply)
            raise MalformedResponseError(
                "Reply was not in JSON format", raw_reply
            ) from err
