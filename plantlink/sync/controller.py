from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from plantlink.core.errors import ChannelError
from plantlink.core.schedule import build_schedule
from plantlink.domain.state import DeviceConfigState, DimmedLight, WaterSchedule
from plantlink.transports.base import PropertyChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyNames:
    prompt: str = "plantPrompt"
    moisture_threshold: str = "moistureThreshold"
    lighting_frequency: str = "lightingFrequency"
    lighting_duration: str = "lightingDuration"
    watering_frequency: str = "wateringFrequency"
    watering_duration: str = "wateringDuration"
    dimmed_light: str = "dimmedLight"
    water_schedule: str = "WatercloudScheduler"

    def config_properties(self) -> tuple[str, ...]:
        return (
            self.moisture_threshold,
            self.lighting_frequency,
            self.lighting_duration,
            self.watering_frequency,
            self.watering_duration,
            self.dimmed_light,
            self.water_schedule,
        )


@dataclass
class ControllerState:
    config: DeviceConfigState = field(default_factory=DeviceConfigState)
    dimmed_light: DimmedLight = field(default_factory=DimmedLight)
    schedule: WaterSchedule = field(default_factory=lambda: build_schedule(DeviceConfigState()))


class SynchronizationController:
    """Single owner of the device configuration; every change goes out as cloud properties."""

    def __init__(self, channel: PropertyChannel, names: PropertyNames | None = None) -> None:
        self.channel = channel
        self.names = names or PropertyNames()
        self._state = ControllerState()

    @property
    def config(self) -> DeviceConfigState:
        return self._state.config

    @property
    def dimmed_light(self) -> DimmedLight:
        return self._state.dimmed_light

    @property
    def schedule(self) -> WaterSchedule:
        return self._state.schedule

    def snapshot(self) -> dict[str, Any]:
        config = self._state.config
        return {
            self.names.moisture_threshold: config.moisture_threshold,
            self.names.lighting_frequency: config.lighting_frequency,
            self.names.lighting_duration: config.lighting_duration,
            self.names.watering_frequency: config.watering_frequency,
            self.names.watering_duration: config.watering_duration,
            self.names.dimmed_light: self._state.dimmed_light.to_property(),
            self.names.water_schedule: self._state.schedule.to_property(),
        }

    def publications(self) -> list[tuple[str, Any]]:
        """Property updates for the current state, in publish order."""
        config = self._state.config
        return [
            (self.names.moisture_threshold, config.moisture_threshold),
            (self.names.lighting_duration, config.lighting_duration),
            (self.names.watering_frequency, config.watering_frequency),
            (self.names.watering_duration, config.watering_duration),
            (self.names.dimmed_light, self._state.dimmed_light.to_property()),
            (self.names.water_schedule, self._state.schedule.to_property()),
        ]

    async def apply_config(self, new_state: DeviceConfigState) -> None:
        # State is swapped before the first await: concurrent appliers are last-write-wins.
        previous_config, previous_schedule = self._state.config, self._state.schedule
        self._state.config = new_state
        self._state.schedule = build_schedule(new_state)
        updates = self.publications()
        logger.info("config_applied", extra={"details": {"config": self.snapshot()}})
        try:
            for name, value in updates:
                await self.channel.send_property(name, value)
        except ChannelError:
            # Roll back unless a later apply already replaced this state.
            if self._state.config is new_state:
                self._state.config = previous_config
                self._state.schedule = previous_schedule
                logger.warning(
                    "config_rolled_back",
                    extra={"details": {"config": self.snapshot()}},
                )
            raise

    async def publish_reply(self, message: str) -> None:
        await self.channel.send_property(self.names.prompt, message)
