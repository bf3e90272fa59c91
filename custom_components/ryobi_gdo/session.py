"""Session state shared by the Ryobi cloud calls."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from http.cookiejar import http2time
import logging
import re

from .const import (
    REQUEST_TIMEOUT,
    VERIFY_SSL,
    WS_AUTH_TIMEOUT,
    WS_CONNECT_TIMEOUT,
    WS_PONG_TIMEOUT,
)

LOGGER = logging.getLogger(__name__)

COOKIE_EXPIRES = re.compile(r"expires\s*=\s*([^;]+)", re.IGNORECASE)
COOKIE_PAIR = re.compile(r"([^=]+)=([^;]+)")


@dataclass(frozen=True)
class Credentials:
    """Ryobi account credentials."""

    email: str
    password: str


@dataclass(frozen=True)
class ConnectionPolicy:
    """Network policy for one client.

    Each timeout bounds one suspension point; None waits indefinitely.
    """

    verify_ssl: bool = VERIFY_SSL
    request_timeout: float | None = REQUEST_TIMEOUT
    ws_connect_timeout: float | None = WS_CONNECT_TIMEOUT
    ws_auth_timeout: float | None = WS_AUTH_TIMEOUT
    ws_pong_timeout: float | None = WS_PONG_TIMEOUT


@dataclass
class SessionStore:
    """Cookies, API key and cookie expiry for the current session.

    Not safe for concurrent writers; last write wins.
    """

    cookies: dict[str, str] = field(default_factory=dict)
    api_key: str | None = None
    cookie_expires: datetime | None = None

    def merge(self, set_cookies: Iterable[str]) -> None:
        """Merge Set-Cookie header values into the session."""
        for cookie in set_cookies:
            expires = COOKIE_EXPIRES.search(cookie)
            if expires:
                self.cookie_expires = _parse_expires(expires.group(1))
            pair = COOKIE_PAIR.search(cookie)
            if pair:
                self.cookies[pair.group(1).strip()] = pair.group(2)

    def cookie_header(self) -> str:
        """Return the cookie request header value."""
        return "; ".join(f"{name}={value}" for name, value in self.cookies.items())

    def api_key_valid(self, now: datetime | None = None) -> bool:
        """Return True while the cached API key can be trusted."""
        if now is None:
            now = datetime.now(tz=UTC)
        return bool(
            self.api_key
            and self.cookie_expires is not None
            and self.cookie_expires > now
        )


def _parse_expires(value: str) -> datetime | None:
    timestamp = http2time(value.strip())
    if timestamp is None:
        LOGGER.debug("Unable to parse cookie expiry: %s", value)
        return None
    return datetime.fromtimestamp(timestamp, tz=UTC)
