"""API interface for Ryobi GDO."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp  # type: ignore

from .auth import AuthManager
from .const import DOOR_CLOSE, DOOR_COMMAND, DOOR_OPEN
from .devices import DeviceResolver
from .exceptions import AuthenticationError, RyobiError
from .models import Device, DeviceType, DoorState
from .session import ConnectionPolicy, Credentials, SessionStore
from .transport import RyobiHttpClient
from .websocket import CommandChannel

LOGGER = logging.getLogger(__name__)


class RyobiApiClient:
    """Class for interacting with the Ryobi Garage Door Opener API.

    Operations on one client are serialized; callers sharing a device should
    share the client.
    """

    def __init__(
        self,
        username: str,
        password: str,
        session: aiohttp.ClientSession,
        device_id: str | None = None,
        device_name: str | None = None,
        policy: ConnectionPolicy | None = None,
    ) -> None:
        """Initialize the API object."""
        self.credentials = Credentials(username, password)
        self.store = SessionStore()
        self.policy = policy or ConnectionPolicy()
        self.device = Device(id=device_id or None, name=device_name or None)
        self._http = RyobiHttpClient(session, self.store, self.policy)
        self.auth = AuthManager(self._http, self.credentials)
        self.resolver = DeviceResolver(self._http, self.auth)
        self.channel = CommandChannel(self._http, self.auth, self.resolver)
        self._lock = asyncio.Lock()

    async def async_check_credentials(self) -> bool:
        """Return True when the credentials yield an API key."""
        try:
            await self.auth.async_ensure_api_key()
        except AuthenticationError as err:
            LOGGER.error("Login failed: %s", err)
            return False
        return True

    async def async_get_devices(self) -> list[Device]:
        """Return devices found on the account."""
        async with self._lock:
            return await self.resolver.async_list_devices()

    async def async_get_status(self) -> DoorState:
        """Refresh the device and return its door state."""
        LOGGER.debug("Updating ryobi data")
        async with self._lock:
            self.device = await self.resolver.async_update_device(self.device)
        state = self.device.door_state
        if state == DoorState.UNKNOWN:
            LOGGER.error(
                "Unable to query door state (code %s) for %s",
                self.device.state,
                self.device.id,
            )
        return state

    async def async_send_door_command(self, command: dict[str, Any]) -> None:
        """Send a door command, raising on failure."""
        async with self._lock:
            self.device = await self.channel.async_send_command(self.device, command)

    async def async_open_door(self) -> bool:
        """Open the door; failures are logged, not raised."""
        LOGGER.debug("GARAGEDOOR openDoor")
        try:
            await self.async_send_door_command({DOOR_COMMAND: DOOR_OPEN})
        except RyobiError as err:
            LOGGER.error("Error sending openDoor command: %s", err)
            return False
        return True

    async def async_close_door(self) -> bool:
        """Close the door; failures are logged, not raised."""
        LOGGER.debug("GARAGEDOOR closeDoor")
        try:
            await self.async_send_door_command({DOOR_COMMAND: DOOR_CLOSE})
        except RyobiError as err:
            LOGGER.error("Error sending closeDoor command: %s", err)
            return False
        return True

    @staticmethod
    def door_openers(devices: list[Device]) -> dict[str, str]:
        """Return device ids mapped to names, hubs excluded."""
        return {
            device.id: device.name or device.id
            for device in devices
            if device.id and device.type != DeviceType.HUB
        }
