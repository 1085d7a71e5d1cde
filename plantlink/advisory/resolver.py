from __future__ import annotations

import json
import logging
import re
from typing import Any

from plantlink.advisory.client import AdvisoryCapability
from plantlink.advisory.prompts import CARE_SYSTEM_INSTRUCTION
from plantlink.core.errors import AdvisoryParseError
from plantlink.domain.state import DeviceConfigState
from plantlink.parsing.care import validate_care_instructions

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


def _strip_fence(text: str) -> str:
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def parse_care_record(text: str) -> dict[str, Any]:
    """
    Decode the advisory answer into a JSON object.

    Raises:
        AdvisoryParseError: If the text is not JSON or not a JSON object.
    """
    try:
        record = json.loads(_strip_fence(text))
    except ValueError as exc:
        raise AdvisoryParseError(f"Advisory response is not valid JSON: {exc}") from exc
    if not isinstance(record, dict):
        raise AdvisoryParseError(f"Advisory response is not a JSON object: {type(record).__name__}")
    return record


class CareInstructionResolver:
    def __init__(self, advisory: AdvisoryCapability) -> None:
        self.advisory = advisory

    async def resolve(self, plant_name: str) -> DeviceConfigState:
        """
        Ask the advisory backend for the care configuration of a plant.

        Raises:
            AdvisoryError: If the backend call fails.
            AdvisoryParseError: If the answer is not a JSON object.
            ValidationError: If a care field is missing or not numeric.
        """
        text = await self.advisory.complete(CARE_SYSTEM_INSTRUCTION, plant_name)
        record = parse_care_record(text)
        state = validate_care_instructions(record)
        logger.info("care_instructions_resolved", extra={"details": {"plant": plant_name, "record": record}})
        return state
