"""
This package defines the core domain models for plantlink: the device care
configuration, the placeholder light record, the water scheduler record and
the property change event delivered by channels.
"""
from plantlink.domain.state import DeviceConfigState, DimmedLight, PropertyEvent, WaterSchedule

__all__ = ["DeviceConfigState", "DimmedLight", "PropertyEvent", "WaterSchedule"]
