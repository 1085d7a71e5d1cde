"""End-to-end tests for the bridge on the in-memory channel."""
import json
import re
from unittest.mock import AsyncMock, patch

import pytest

from plantlink.bridge import GREETING_TEXT, Bridge, main
from plantlink.config import BridgeSettings
from plantlink.core.errors import ChannelConnectError, ChannelPublishError
from plantlink.core.logging import create_logger, get_ring_buffer
from plantlink.domain.state import DeviceConfigState
from plantlink.transports.local.transport import LocalChannel

POTHOS = {
    "moistureThreshold": 60,
    "lightingFrequency": 6,
    "lightingDuration": 10,
    "wateringFrequency": 2,
    "wateringDuration": 20,
}


def _advisory(text=""):
    advisory = AsyncMock()
    advisory.complete = AsyncMock(return_value=text)
    return advisory


def _events(name):
    ring = get_ring_buffer(create_logger("plantlink"))
    return [event for event in ring.get_events() if event["event"] == name]


async def _started_bridge(advisory):
    create_logger("plantlink")
    channel = LocalChannel()
    bridge = Bridge(channel, advisory)
    await bridge.start()
    return channel, bridge


@pytest.mark.asyncio
async def test_start_sends_greeting():
    channel, bridge = await _started_bridge(_advisory())
    assert channel.published == [("plantPrompt", f"PING:1:{GREETING_TEXT}")]
    await bridge.stop()
    assert channel.connected is False


@pytest.mark.asyncio
async def test_pothos_scenario():
    advisory = _advisory(json.dumps(POTHOS))
    channel, bridge = await _started_bridge(advisory)

    await channel.write("plantPrompt", "PING:1:Pothos")
    await bridge.idle()

    assert channel.published_values("wateringFrequency") == [2]
    assert channel.published_values("moistureThreshold") == [60]
    assert channel.properties["WatercloudScheduler"] == {"frm": 1719534015, "len": 20, "to": 0, "msk": 134217734}
    assert channel.properties["dimmedLight"] == {"bri": "50", "swi": "true"}
    reply = channel.properties["plantPrompt"]
    assert re.match(r"PING:1:", reply)
    assert "Pothos" in reply
    assert "60%" in reply
    assert bridge.controller.config == DeviceConfigState(60, 6, 10, 2, 20)
    await bridge.stop()
    advisory.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_untagged_name_is_a_name_request():
    advisory = _advisory(json.dumps(POTHOS))
    channel, bridge = await _started_bridge(advisory)

    await channel.write("plantPrompt", "  Pothos  ")
    await bridge.idle()

    assert advisory.complete.await_args.args[1] == "Pothos"
    assert channel.properties["plantPrompt"].startswith("PING:1:Plant: Pothos")
    await bridge.stop()


@pytest.mark.asyncio
async def test_unknown_tag_scenario():
    advisory = _advisory()
    channel, bridge = await _started_bridge(advisory)

    await channel.write("plantPrompt", "PING:9:hello")
    await bridge.idle()

    assert channel.properties["plantPrompt"] == "PING:9:Unknown request type. Please try again."
    assert [name for name, _ in channel.published] == ["plantPrompt", "plantPrompt"]
    assert bridge.controller.config == DeviceConfigState()
    advisory.complete.assert_not_called()
    await bridge.stop()


@pytest.mark.asyncio
async def test_config_property_changes_are_logged():
    channel, bridge = await _started_bridge(_advisory())
    await channel.write("moistureThreshold", 42)
    events = _events("property_changed")
    assert events[-1]["details"] == {"name": "moistureThreshold", "value": 42}
    await bridge.stop()


@pytest.mark.asyncio
async def test_disconnect_is_logged():
    channel, bridge = await _started_bridge(_advisory())
    channel.disconnect("broker went away")
    assert _events("channel_disconnected")[-1]["details"] == {"message": "broker went away"}
    await bridge.stop()


class _UnreachableChannel(LocalChannel):
    async def connect(self):
        raise ChannelConnectError("Could not connect to Arduino IoT Cloud: 401")


def _settings():
    return BridgeSettings(
        ARDUINO_CLOUD_DEVICEID="dev-1",
        ARDUINO_CLOUD_SECRETKEY="secret",
        OPENAI_API_KEY="sk-test",
        _env_file=None,
    )


def test_main_exits_nonzero_when_channel_unreachable():
    advisory = _advisory()
    bridge = Bridge(_UnreachableChannel(), advisory)
    with patch("plantlink.bridge.get_settings", return_value=_settings()), patch.object(
        Bridge, "from_settings", return_value=bridge
    ):
        assert main([]) == 1
    advisory.close.assert_awaited_once()


class _ChannelWithoutPrompt(LocalChannel):
    async def send_property(self, name, value):
        if name == "plantPrompt":
            raise ChannelPublishError("Failed to publish 'plantPrompt': 404 Not Found")
        await super().send_property(name, value)


def test_main_exits_nonzero_when_greeting_fails():
    advisory = _advisory()
    channel = _ChannelWithoutPrompt()
    bridge = Bridge(channel, advisory)
    with patch("plantlink.bridge.get_settings", return_value=_settings()), patch.object(
        Bridge, "from_settings", return_value=bridge
    ):
        assert main([]) == 1
    assert channel.connected is False
    advisory.close.assert_awaited_once()
    failure = _events("channel_connect_failed")[-1]
    assert "plantPrompt" in failure["details"]["error"]


def test_main_rejects_missing_credentials(monkeypatch):
    for key in ("ARDUINO_CLOUD_DEVICEID", "ARDUINO_CLOUD_SECRETKEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(key, raising=False)
    with patch("plantlink.bridge.get_settings", side_effect=lambda: BridgeSettings(_env_file=None)):
        assert main([]) == 2
