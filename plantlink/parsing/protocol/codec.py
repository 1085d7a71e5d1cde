"""
Codec for the tagged text protocol carried in the prompt property.

Messages look like ``PING:<tag>:<text>`` where ``<tag>`` is a single digit.
Text without the prefix is treated as a plant name request so older
dashboards that only send a name keep working.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional

PING_PREFIX = "PING"

_PING_RE = re.compile(r"PING:(\d):(.+)")


class RequestTag(IntEnum):
    NAME_REQUEST = 1
    WATER_REQUEST = 2
    DIAGNOSIS_REQUEST = 3


@dataclass(frozen=True)
class DecodedRequest:
    tag: int
    content: str

    @property
    def request_tag(self) -> Optional[RequestTag]:
        try:
            return RequestTag(self.tag)
        except ValueError:
            return None


def parse_message(raw: Any) -> DecodedRequest:
    """
    Split a raw property value into its tag and content.

    Never raises: anything that does not match ``PING:<digit>:<text>`` is a
    name request carrying the whole (stripped) text.
    """
    text = raw if isinstance(raw, str) else ("" if raw is None else str(raw))
    match = _PING_RE.fullmatch(text)
    if match:
        return DecodedRequest(tag=int(match.group(1)), content=match.group(2).strip())
    return DecodedRequest(tag=RequestTag.NAME_REQUEST.value, content=text.strip())


def format_message(tag: int, text: str) -> str:
    return f"{PING_PREFIX}:{int(tag)}:{text}"
