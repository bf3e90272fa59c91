"""Ryobi platform for the cover component."""

from __future__ import annotations

import logging
from typing import Final

from homeassistant.components.cover import (
    CoverDeviceClass,
    CoverEntity,
    CoverEntityDescription,
    CoverEntityFeature,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.entity import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import ATTR_ATTRIBUTION, ATTRIBUTION, CONF_DEVICE_ID, COORDINATOR, DOMAIN
from .coordinator import RyobiDataUpdateCoordinator
from .models import DoorState

LOGGER = logging.getLogger(__name__)

COVER_TYPES: Final[dict[str, CoverEntityDescription]] = {
    "garage_door": CoverEntityDescription(
        name="Garage Door",
        key="door_state",
        device_class=CoverDeviceClass.GARAGE,
    ),
}

SUPPORTED_FEATURES = CoverEntityFeature.OPEN | CoverEntityFeature.CLOSE


async def async_setup_entry(hass, entry, async_add_entities):
    """Set up the cover entities."""
    coordinator = hass.data[DOMAIN][entry.entry_id][COORDINATOR]

    async_add_entities(
        [RyobiCover(description, coordinator, entry) for description in COVER_TYPES.values()],
        False,
    )


class RyobiCover(CoordinatorEntity, CoverEntity):
    """Representation of a ryobi cover."""

    _attr_supported_features = SUPPORTED_FEATURES

    def __init__(
        self,
        cover_description: CoverEntityDescription,
        coordinator: RyobiDataUpdateCoordinator,
        config_entry: ConfigEntry,
    ) -> None:
        """Initialize the cover."""
        super().__init__(coordinator)
        self._config = config_entry
        self.entity_description = cover_description
        self._name = cover_description.name
        self.device_id = config_entry.data[CONF_DEVICE_ID]
        self._attr_unique_id = f"ryobi_gdo_{self._name}_{self.device_id}"

    @property
    def device_info(self) -> DeviceInfo:
        """Return device registry information for this entity."""
        return DeviceInfo(
            identifiers={(DOMAIN, self.device_id)},
            manufacturer="Ryobi",
            model=self.coordinator.data.get("model") or "GDO",
            name=self.coordinator.data.get("device_name")
            or "Ryobi Garage Door Opener",
        )

    @property
    def name(self):
        """Return the name of the cover."""
        return self._name

    @property
    def _door_state(self) -> DoorState:
        return self.coordinator.data.get(self.entity_description.key, DoorState.UNKNOWN)

    @property
    def is_opening(self) -> bool | None:
        """Return if the cover is opening or not."""
        if self._door_state == DoorState.UNKNOWN:
            return None
        return self._door_state == DoorState.OPENING

    @property
    def is_closing(self) -> bool | None:
        """Return if the cover is closing or not."""
        if self._door_state == DoorState.UNKNOWN:
            return None
        return self._door_state == DoorState.CLOSING

    @property
    def is_closed(self) -> bool | None:
        """Return if the cover is closed or not."""
        if self._door_state == DoorState.UNKNOWN:
            return None
        return self._door_state == DoorState.CLOSED

    async def async_close_cover(self, **kwargs):
        """Close the cover."""
        LOGGER.debug("Closing garage door")
        await self.coordinator.close_door()

    async def async_open_cover(self, **kwargs):
        """Open the cover."""
        LOGGER.debug("Opening garage door")
        await self.coordinator.open_door()

    @property
    def extra_state_attributes(self) -> dict | None:
        """Return cover attributes."""
        attrs = {ATTR_ATTRIBUTION: ATTRIBUTION}
        if self.coordinator.data.get("state_as_of") is not None:
            attrs["state_as_of"] = self.coordinator.data["state_as_of"].isoformat()
        return attrs
