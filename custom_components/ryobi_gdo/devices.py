"""Device discovery and status for the Ryobi cloud."""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from datetime import UTC, datetime
import logging
from typing import Any

from .auth import AuthManager
from .const import DEVICE_GET_ENDPOINT, GARAGE_DOOR_PREFIX
from .exceptions import AddressingError, AuthenticationError, MalformedResponseError
from .models import (
    Device,
    DeviceType,
    find_garage_door_module,
    parse_device_type_map,
)
from .transport import RyobiHttpClient

LOGGER = logging.getLogger(__name__)


class DeviceResolver:
    """Resolve device ids, door addresses and door state."""

    def __init__(self, http: RyobiHttpClient, auth: AuthManager) -> None:
        """Initialize the resolver."""
        self._http = http
        self._auth = auth

    async def async_list_devices(self) -> list[Device]:
        """Return the devices registered on the account."""
        await self._auth.async_ensure_api_key()
        reply = await self._http.request("get", self._http.url(DEVICE_GET_ENDPOINT))
        result = reply.get("result") if isinstance(reply, Mapping) else None
        if not isinstance(result, list):
            raise AuthenticationError(
                f"Unauthorized -- check your ryobi username/password: {result}",
                result,
            )
        return [_device_from_entry(entry) for entry in result]

    async def async_resolve_device_id(self, device: Device) -> Device:
        """Return the device with its id filled in."""
        if device.id:
            return device

        LOGGER.debug("Looking up device id for %s", device.name or "first opener")
        devices = await self.async_list_devices()
        if device.name:
            found = next((d for d in devices if d.name == device.name), None)
        else:
            found = next((d for d in devices if d.type != DeviceType.HUB), None)
        if found is None or not found.id:
            raise AddressingError(
                f"No device found matching {device.name or 'a garage door opener'}"
            )

        LOGGER.debug("device.id: %s", found.id)
        return _merge(device, found)

    async def async_update_device(self, device: Device) -> Device:
        """Return the device with its door address and state refreshed."""
        device = await self.async_resolve_device_id(device)
        await self._auth.async_ensure_api_key()
        reply = await self._http.request(
            "get", self._http.url(f"{DEVICE_GET_ENDPOINT}/{device.id}")
        )
        result = reply.get("result") if isinstance(reply, Mapping) else None
        if not isinstance(result, list) or not result:
            raise MalformedResponseError(f"Invalid response: {reply}", reply)

        first = result[0] if isinstance(result[0], Mapping) else {}
        dtm = first.get("deviceTypeMap")
        if not isinstance(dtm, Mapping):
            LOGGER.error("deviceTypeMap not found for %s", device.id)
            return device

        modules = parse_device_type_map(dtm)
        LOGGER.debug("Modules indexed: %s", list(modules))
        door = find_garage_door_module(modules)
        port_id = door.port_id if door is not None else None
        module_id = door.module_id if door is not None else None
        state = None
        if port_id is not None:
            status = modules.get(f"{GARAGE_DOOR_PREFIX}{port_id}")
            state = status.door_state if status is not None else None

        return dataclasses.replace(
            device,
            module_id=module_id,
            port_id=port_id,
            state=state,
            state_as_of=datetime.now(tz=UTC),
        )


def _device_from_entry(entry: Any) -> Device:
    """Map a raw device list entry."""
    entry = entry if isinstance(entry, Mapping) else {}
    meta = entry.get("metaData")
    meta = meta if isinstance(meta, Mapping) else {}
    type_ids = entry.get("deviceTypeIds")
    model = type_ids[0] if isinstance(type_ids, list) and type_ids else ""
    model = model if isinstance(model, str) else ""
    return Device(
        id=entry.get("varName") or "",
        name=meta.get("name") or "",
        description=meta.get("description") or "",
        model=model,
        type=DeviceType.from_model(model),
    )


def _merge(device: Device, found: Device) -> Device:
    """Copy the non-empty fields of found onto device."""
    changes = {
        f.name: getattr(found, f.name)
        for f in dataclasses.fields(found)
        if getattr(found, f.name) not in (None, "")
    }
    return dataclasses.replace(device, **changes)
