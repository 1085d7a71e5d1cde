"""
Water scheduler encoding for the cloud scheduler property.

The firmware reads a record of ``{frm, len, to, msk}`` where ``msk`` is a
32-bit repeat pattern. Only eight patterns are known to the firmware; every
watering frequency maps onto one of them.
"""
from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any

from plantlink.domain.state import DeviceConfigState, WaterSchedule

# Fixed start of every schedule, 2024-06-28T00:20:15Z.
SCHEDULE_ANCHOR = int(dt.datetime(2024, 6, 28, 0, 20, 15, tzinfo=dt.timezone.utc).timestamp())

# Open-ended schedule.
SCHEDULE_UNTIL = 0


class ScheduleMask(Enum):
    DAILY = "daily"
    HOURLY = "hourly"
    ONE_DAY = "oneDay"
    TWO_DAY = "twoDay"
    THREE_DAY = "threeDay"
    FOUR_DAY = "fourDay"
    FIVE_DAY = "fiveDay"
    SIX_DAY = "sixDay"


BITMASKS: dict[ScheduleMask, int] = {
    ScheduleMask.DAILY: 3288334337,
    ScheduleMask.HOURLY: 2214592513,
    ScheduleMask.ONE_DAY: 134217729,
    ScheduleMask.TWO_DAY: 134217734,
    ScheduleMask.THREE_DAY: 134217742,
    ScheduleMask.FOUR_DAY: 134217758,
    ScheduleMask.FIVE_DAY: 134217790,
    ScheduleMask.SIX_DAY: 134217854,
}

# Watering frequency in days -> mask. 7 (weekly) has no firmware pattern.
FREQUENCY_MASKS: dict[int, ScheduleMask] = {
    1: ScheduleMask.ONE_DAY,
    2: ScheduleMask.TWO_DAY,
    3: ScheduleMask.THREE_DAY,
    4: ScheduleMask.FOUR_DAY,
    5: ScheduleMask.FIVE_DAY,
    6: ScheduleMask.SIX_DAY,
}

FALLBACK_MASK = ScheduleMask.DAILY


def mask_for(frequency_days: Any) -> int:
    """
    Return the scheduler bitmask for a watering frequency.

    Args:
        frequency_days: Days between waterings.

    Returns:
        The mask for 1-6 days, or the daily mask for anything else,
        including 0, 7, negatives and non-integers.
    """
    if isinstance(frequency_days, bool) or not isinstance(frequency_days, int):
        return BITMASKS[FALLBACK_MASK]
    return BITMASKS[FREQUENCY_MASKS.get(frequency_days, FALLBACK_MASK)]


def build_schedule(state: DeviceConfigState) -> WaterSchedule:
    return WaterSchedule(
        frm=SCHEDULE_ANCHOR,
        length=state.watering_duration,
        until=SCHEDULE_UNTIL,
        mask=mask_for(state.watering_frequency),
    )
