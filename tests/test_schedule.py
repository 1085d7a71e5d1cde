"""Tests for the water scheduler bitmask encoding."""
import pytest

from plantlink.core.schedule import (
    BITMASKS,
    SCHEDULE_ANCHOR,
    ScheduleMask,
    build_schedule,
    mask_for,
)
from plantlink.domain.state import DeviceConfigState


def test_bitmask_constants():
    assert BITMASKS == {
        ScheduleMask.DAILY: 3288334337,
        ScheduleMask.HOURLY: 2214592513,
        ScheduleMask.ONE_DAY: 134217729,
        ScheduleMask.TWO_DAY: 134217734,
        ScheduleMask.THREE_DAY: 134217742,
        ScheduleMask.FOUR_DAY: 134217758,
        ScheduleMask.FIVE_DAY: 134217790,
        ScheduleMask.SIX_DAY: 134217854,
    }


@pytest.mark.parametrize(
    "days, expected",
    [
        (1, 134217729),
        (2, 134217734),
        (3, 134217742),
        (4, 134217758),
        (5, 134217790),
        (6, 134217854),
    ],
)
def test_known_frequencies(days, expected):
    assert mask_for(days) == expected


@pytest.mark.parametrize("days", [0, 7, -5, 8, 1000, 2.5, "2", None, True])
def test_fallback_is_daily(days):
    assert mask_for(days) == 3288334337


def test_mask_is_always_a_known_constant():
    known = set(BITMASKS.values())
    for days in range(-20, 40):
        assert mask_for(days) in known


def test_anchor_is_fixed():
    assert SCHEDULE_ANCHOR == 1719534015


def test_build_schedule():
    state = DeviceConfigState(
        moisture_threshold=40,
        lighting_frequency=6,
        lighting_duration=8,
        watering_frequency=3,
        watering_duration=45,
    )
    schedule = build_schedule(state)
    assert schedule.to_property() == {"frm": SCHEDULE_ANCHOR, "len": 45, "to": 0, "msk": 134217742}


def test_build_schedule_weekly_uses_daily_mask():
    schedule = build_schedule(DeviceConfigState(watering_frequency=7, watering_duration=10))
    assert schedule.mask == 3288334337
    assert schedule.length == 10
