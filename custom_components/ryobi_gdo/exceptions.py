"""Exceptions raised by the Ryobi GDO cloud client."""

from __future__ import annotations

from typing import Any


class RyobiError(Exception):
    """Base exception for Ryobi cloud failures."""

    def __init__(self, message: str, payload: Any = None) -> None:
        """Initialize with an optional raw payload for diagnostics."""
        super().__init__(message)
        self.payload = payload


class AuthenticationError(RyobiError):
    """Login rejected or the API answered with the unauthorized shape."""


class AddressingError(RyobiError):
    """Device id, module id or port id could not be resolved."""


class ChannelClosedError(RyobiError):
    """Websocket closed before the command was sent."""


class TransportError(RyobiError):
    """Lower level connection fault."""


class MalformedResponseError(RyobiError):
    """Unexpected response shape from an HTTP endpoint."""
