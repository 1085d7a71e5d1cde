from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DeviceConfigState:
    """
    Care configuration pushed to the device.

    Ranges are the ones requested from the advisory backend; they are not
    enforced here.

    Attributes:
        moisture_threshold: Ideal soil moisture in percent (0-100).
        lighting_frequency: Lighting hours per day (0-24).
        lighting_duration: Lighting duration in hours (0-24).
        watering_frequency: Days between waterings (1-7).
        watering_duration: Pump run time in seconds (1-300).
    """
    moisture_threshold: int = 0
    lighting_frequency: int = 0
    lighting_duration: int = 0
    watering_frequency: int = 0
    watering_duration: int = 0


@dataclass(frozen=True)
class DimmedLight:
    # Placeholder values until the light sensor is wired in.
    brightness: str = "50"
    switch_on: str = "true"

    def to_property(self) -> dict[str, str]:
        return {"bri": self.brightness, "swi": self.switch_on}


@dataclass(frozen=True)
class WaterSchedule:
    """Cloud scheduler record: start epoch, run length, end (0 = open) and repeat mask."""
    frm: int
    length: int
    until: int
    mask: int

    def to_property(self) -> dict[str, int]:
        return {"frm": self.frm, "len": self.length, "to": self.until, "msk": self.mask}


@dataclass(frozen=True)
class PropertyEvent:
    name: str
    value: Any
