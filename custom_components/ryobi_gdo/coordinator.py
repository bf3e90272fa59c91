"""DataUpdateCoordinator for ryobi_gdo."""

from __future__ import annotations

from datetime import timedelta
import logging

import aiohttp  # type: ignore

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .api import RyobiApiClient
from .const import CONF_DEVICE_ID
from .exceptions import RyobiError

LOGGER = logging.getLogger(__name__)


class RyobiDataUpdateCoordinator(DataUpdateCoordinator):
    """Class to manage fetching data from the API."""

    def __init__(
        self,
        hass: HomeAssistant,
        interval: int,
        config: ConfigEntry,
        session: aiohttp.ClientSession,
    ) -> None:
        """Initialize."""
        self.interval = timedelta(seconds=interval)
        self.name = f"Ryobi GDO ({config.data.get(CONF_DEVICE_ID)})"
        self.config = config
        self.client = RyobiApiClient(
            config.data.get(CONF_USERNAME, ""),
            config.data.get(CONF_PASSWORD, ""),
            session,
            config.data.get(CONF_DEVICE_ID, ""),
        )

        LOGGER.debug("Data will be update every %s", self.interval)

        super().__init__(hass, LOGGER, name=self.name, update_interval=self.interval)

    async def _async_update_data(self) -> dict:
        """Return data."""
        try:
            door_state = await self.client.async_get_status()
        except RyobiError as err:
            raise UpdateFailed(f"Error updating Ryobi GDO: {err}") from err
        device = self.client.device
        return {
            "door_state": door_state,
            "device_name": device.name,
            "model": device.model,
            "state_as_of": device.state_as_of,
        }

    async def open_door(self) -> None:
        """Open the door and refresh its state."""
        if await self.client.async_open_door():
            await self.async_request_refresh()

    async def close_door(self) -> None:
        """Close the door and refresh its state."""
        if await self.client.async_close_door():
            await self.async_request_refresh()
