"""Data models for Ryobi garage door openers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, StrEnum
import re
from typing import Any, NamedTuple

from homeassistant.const import (
    STATE_CLOSED,
    STATE_CLOSING,
    STATE_OPEN,
    STATE_OPENING,
    STATE_UNKNOWN,
)

from .const import DEVICE_TYPE_GDO, DEVICE_TYPE_HUB, GARAGE_DOOR_PREFIX

HUB_PATTERN = re.compile(DEVICE_TYPE_HUB, re.IGNORECASE)


class DoorState(StrEnum):
    """Door position reported by the opener."""

    CLOSED = STATE_CLOSED
    OPEN = STATE_OPEN
    CLOSING = STATE_CLOSING
    OPENING = STATE_OPENING
    UNKNOWN = STATE_UNKNOWN

    @classmethod
    def from_code(cls, code: int | float | None) -> DoorState:
        """Map a vendor door state code, unmapped codes are unknown."""
        return DOOR_STATE.get(code, cls.UNKNOWN) if code is not None else cls.UNKNOWN


DOOR_STATE = {
    0: DoorState.CLOSED,
    1: DoorState.OPEN,
    2: DoorState.CLOSING,
    3: DoorState.OPENING,
}


class DeviceType(StrEnum):
    """Kind of device on the account."""

    HUB = DEVICE_TYPE_HUB
    GDO = DEVICE_TYPE_GDO

    @classmethod
    def from_model(cls, model: str) -> DeviceType:
        """Classify a deviceTypeIds entry."""
        return cls.HUB if HUB_PATTERN.search(model) else cls.GDO


class DeviceResolution(Enum):
    """How much of a device is known."""

    UNRESOLVED = "unresolved"
    PARTIAL = "partial"
    RESOLVED = "resolved"


class DoorAddress(NamedTuple):
    """Coordinates of the garage door module on a device."""

    device_id: str
    module_id: int | float
    port_id: int | float


@dataclass(frozen=True)
class Device:
    """A Ryobi device, enriched by each resolution step."""

    id: str | None = None
    name: str | None = None
    description: str = ""
    model: str = ""
    type: DeviceType | None = None
    module_id: int | float | None = None
    port_id: int | float | None = None
    state: int | float | None = None
    state_as_of: datetime | None = None

    @property
    def resolution(self) -> DeviceResolution:
        """Return the resolution stage of this device."""
        if self.address is not None:
            return DeviceResolution.RESOLVED
        if self.id or self.name:
            return DeviceResolution.PARTIAL
        return DeviceResolution.UNRESOLVED

    @property
    def address(self) -> DoorAddress | None:
        """Return the door address, or None until it is fully known."""
        if not self.id or self.module_id is None or self.port_id is None:
            return None
        return DoorAddress(self.id, self.module_id, self.port_id)

    @property
    def door_state(self) -> DoorState:
        """Return the semantic door state."""
        return DoorState.from_code(self.state)


@dataclass(frozen=True)
class DeviceModule:
    """One entry of a device status deviceTypeMap."""

    key: str
    profiles: list[str] = field(default_factory=list)
    module_id: int | float | None = None
    port_id: int | float | None = None
    door_state: int | float | None = None

    @classmethod
    def from_payload(cls, key: str, payload: Any) -> DeviceModule:
        """Build a module from its raw map entry."""
        attributes = _mapping(_mapping(payload).get("at"))
        profiles = _value(attributes, "moduleProfiles")
        return cls(
            key=key,
            profiles=[p for p in profiles if isinstance(p, str)]
            if isinstance(profiles, list)
            else [],
            module_id=to_number(_value(attributes, "moduleId")),
            port_id=to_number(_value(attributes, "portId")),
            door_state=to_number(_value(attributes, "doorState")),
        )

    @property
    def is_garage_door(self) -> bool:
        """Return True when the module exposes a garage door profile."""
        return any(p.startswith(GARAGE_DOOR_PREFIX) for p in self.profiles)


def parse_device_type_map(dtm: Mapping[str, Any]) -> dict[str, DeviceModule]:
    """Parse a deviceTypeMap into modules keyed by map key."""
    return {key: DeviceModule.from_payload(key, value) for key, value in dtm.items()}


def find_garage_door_module(
    modules: Mapping[str, DeviceModule],
) -> DeviceModule | None:
    """Return the first module carrying a garage door profile."""
    return next((m for m in modules.values() if m.is_garage_door), None)


def to_number(value: Any) -> int | float | None:
    """Return value when numeric, otherwise None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _value(attributes: Mapping[str, Any], name: str) -> Any:
    return _mapping(attributes.get(name)).get("value")
