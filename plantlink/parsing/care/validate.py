"""
Validation of care instruction records returned by the advisory backend.

The record must carry the five numeric care fields. Values are truncated to
integers; the ranges asked of the backend are not enforced here.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from plantlink.core.errors import ValidationError
from plantlink.domain.state import DeviceConfigState

Number = Union[int, float]

# Wire keys in the order the backend is asked to produce them.
CARE_FIELDS: tuple[str, ...] = (
    "moistureThreshold",
    "lightingFrequency",
    "lightingDuration",
    "wateringFrequency",
    "wateringDuration",
)


class CareInstructions(BaseModel):
    # strict: no "50" -> 50 coercion, no bools; extra keys from the backend are ignored.
    model_config = ConfigDict(strict=True, allow_inf_nan=False, extra="ignore")

    moisture_threshold: Number = Field(alias="moistureThreshold")
    lighting_frequency: Number = Field(alias="lightingFrequency")
    lighting_duration: Number = Field(alias="lightingDuration")
    watering_frequency: Number = Field(alias="wateringFrequency")
    watering_duration: Number = Field(alias="wateringDuration")

    def to_state(self) -> DeviceConfigState:
        return DeviceConfigState(
            moisture_threshold=int(self.moisture_threshold),
            lighting_frequency=int(self.lighting_frequency),
            lighting_duration=int(self.lighting_duration),
            watering_frequency=int(self.watering_frequency),
            watering_duration=int(self.watering_duration),
        )


def _failed_fields(exc: PydanticValidationError) -> tuple[str, ...]:
    fields: list[str] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        if loc and str(loc[0]) not in fields:
            fields.append(str(loc[0]))
    return tuple(fields)


def validate_care_instructions(raw: Any) -> DeviceConfigState:
    """
    Turn a decoded advisory record into a ``DeviceConfigState``.

    Args:
        raw: The decoded JSON value.

    Returns:
        The configuration with every field truncated toward zero.

    Raises:
        ValidationError: If ``raw`` is not a mapping, or a care field is
            missing or not a finite number.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Invalid care instructions: expected an object, got {type(raw).__name__}")
    try:
        instructions = CareInstructions.model_validate(dict(raw))
    except PydanticValidationError as exc:
        fields = _failed_fields(exc)
        raise ValidationError(
            f"Invalid care instructions: missing or non-numeric {', '.join(fields)}",
            fields=fields,
        ) from exc
    return instructions.to_state()
