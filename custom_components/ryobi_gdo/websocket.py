"""Websocket command channel for Ryobi GDO."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from enum import StrEnum
import json
import logging
from typing import Any

import aiohttp  # type: ignore

from .auth import AuthManager
from .const import (
    DEVICE_SET_ENDPOINT,
    WS_AUTH_ID,
    WS_AUTH_METHOD,
    WS_COMMAND_METHOD,
    WS_MSG_TYPE_COMMAND,
)
from .devices import DeviceResolver
from .exceptions import (
    AddressingError,
    AuthenticationError,
    ChannelClosedError,
    RyobiError,
    TransportError,
)
from .models import Device, DoorAddress
from .transport import RyobiHttpClient

LOGGER = logging.getLogger(__name__)

CLOSE_TYPES = (
    aiohttp.WSMsgType.CLOSE,
    aiohttp.WSMsgType.CLOSING,
    aiohttp.WSMsgType.CLOSED,
)


class ChannelState(StrEnum):
    """Progress of a single websocket command."""

    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    AUTHORIZED = "authorized"
    COMMAND_SENT = "command_sent"
    AWAITING_PONG = "awaiting_pong"
    COMPLETE = "complete"
    CLOSED_ERROR = "closed_error"


class CommandChannel:
    """Send one command per websocket connection.

    Ryobi never acknowledges a gdoModuleCommand, so delivery is confirmed by
    a transport ping sent after the command; the pong means the server has
    read everything before it.
    """

    def __init__(
        self,
        http: RyobiHttpClient,
        auth: AuthManager,
        resolver: DeviceResolver,
    ) -> None:
        """Initialize the command channel."""
        self._http = http
        self._auth = auth
        self._resolver = resolver
        self.url = http.url(DEVICE_SET_ENDPOINT, scheme="wss")
        self._state: ChannelState | None = None

    @property
    def state(self) -> ChannelState | None:
        """Return the state of the last command."""
        return self._state

    def _set_state(self, value: ChannelState) -> None:
        self._state = value
        LOGGER.debug("Websocket state: %s", value)

    async def async_send_command(
        self, device: Device, command: dict[str, Any]
    ) -> Device:
        """Send a module command to the door and wait for delivery.

        Returns the device, refreshed when its address had to be resolved.
        """
        if device.address is None:
            device = await self._resolver.async_update_device(device)
        address = device.address
        if address is None:
            raise AddressingError(
                f"Garage door module/port not found for {device.id}", device
            )

        api_key = await self._auth.async_ensure_api_key()
        self._set_state(ChannelState.CONNECTING)
        try:
            await self._run(address, command, api_key)
        except RyobiError:
            self._set_state(ChannelState.CLOSED_ERROR)
            raise
        LOGGER.debug("command finished")
        return device

    async def _run(
        self, address: DoorAddress, command: dict[str, Any], api_key: str
    ) -> None:
        policy = self._http.policy
        sent = False
        try:
            async with asyncio.timeout(policy.ws_connect_timeout):
                ws_client = await self._http.session.ws_connect(
                    self.url,
                    autoping=False,
                    headers=self._http.headers(),
                    ssl=self._http.ssl,
                )
        except aiohttp.WSServerHandshakeError as error:
            if error.status == 401:
                LOGGER.error("Credentials rejected: %s", error)
                raise AuthenticationError(f"Credentials rejected: {error}") from error
            raise TransportError(f"Unexpected response received: {error}") from error
        except TimeoutError as error:
            raise TransportError(f"Timeout connecting to {self.url}") from error
        except aiohttp.ClientError as error:
            raise TransportError(f"Websocket connection failed: {error}") from error

        try:
            self._set_state(ChannelState.AUTHENTICATING)
            LOGGER.debug("sending api key")
            await self.websocket_send(
                ws_client,
                {
                    "jsonrpc": "2.0",
                    "id": WS_AUTH_ID,
                    "method": WS_AUTH_METHOD,
                    "params": {
                        "varName": self._auth.credentials.email,
                        "apiKey": api_key,
                    },
                },
            )
            async with asyncio.timeout(policy.ws_auth_timeout):
                await self._wait_authorized(ws_client)
            self._set_state(ChannelState.AUTHORIZED)

            await self.websocket_send(
                ws_client,
                {
                    "jsonrpc": "2.0",
                    "method": WS_COMMAND_METHOD,
                    "params": {
                        "msgType": WS_MSG_TYPE_COMMAND,
                        "moduleType": address.module_id,
                        "portId": address.port_id,
                        "moduleMsg": command,
                        "topic": address.device_id,
                    },
                },
            )
            sent = True
            self._set_state(ChannelState.COMMAND_SENT)

            LOGGER.debug("sending ping")
            await ws_client.ping()
            self._set_state(ChannelState.AWAITING_PONG)
            async with asyncio.timeout(policy.ws_pong_timeout):
                await self._wait_pong(ws_client, sent)
            LOGGER.debug("pong; terminate")
            self._set_state(ChannelState.COMPLETE)
        except TimeoutError as error:
            raise TransportError(
                f"Timeout waiting for websocket in state {self._state}"
            ) from error
        except (aiohttp.ClientError, ConnectionError) as error:
            LOGGER.error("WebSocket error: %s", error)
            raise TransportError(f"WebSocket error: {error}") from error
        finally:
            await ws_client.close()

    async def _receive(
        self, ws_client: aiohttp.ClientWebSocketResponse, sent: bool
    ) -> aiohttp.WSMessage:
        """Return the next frame, raising on close or error."""
        while True:
            message = await ws_client.receive()
            if message.type == aiohttp.WSMsgType.PING:
                await ws_client.pong(message.data)
                continue
            if message.type in CLOSE_TYPES:
                LOGGER.debug("closing")
                if not sent:
                    LOGGER.error("WebSocket closing before completed")
                    raise ChannelClosedError("WebSocket closed prematurely")
                raise TransportError("WebSocket closed before pong was received")
            if message.type == aiohttp.WSMsgType.ERROR:
                error = ws_client.exception()
                LOGGER.error("WebSocket error: %s", error)
                raise TransportError(f"WebSocket error: {error}") from error
            return message

    async def _wait_authorized(self, ws_client: aiohttp.ClientWebSocketResponse) -> None:
        while True:
            message = await self._receive(ws_client, sent=False)
            if message.type != aiohttp.WSMsgType.TEXT:
                continue
            LOGGER.debug("message received: %s", message.data)
            try:
                reply = json.loads(message.data)
            except ValueError:
                LOGGER.debug("Ignoring non JSON websocket message")
                continue
            result = reply.get("result") if isinstance(reply, Mapping) else None
            if isinstance(result, Mapping) and result.get("authorized"):
                return

    async def _wait_pong(
        self, ws_client: aiohttp.ClientWebSocketResponse, sent: bool
    ) -> None:
        while True:
            message = await self._receive(ws_client, sent)
            if message.type == aiohttp.WSMsgType.PONG:
                return
            LOGGER.debug("message received: %s", message.data)

    async def websocket_send(
        self, ws_client: aiohttp.ClientWebSocketResponse, message: dict
    ) -> None:
        """Send websocket message."""
        LOGGER.debug("Websocket sending data: %s", self.redact_api_key(message))
        await ws_client.send_str(json.dumps(message))

    @staticmethod
    def redact_api_key(message: dict) -> str:
        """Clear API key data from logs."""
        params = message.get("params")
        if isinstance(params, dict) and "apiKey" in params:
            message = {**message, "params": {**params, "apiKey": ""}}
        return json.dumps(message)
