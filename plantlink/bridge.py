from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from functools import partial
from typing import Any, Optional

from pydantic import ValidationError as SettingsError

from plantlink.advisory.client import AdvisoryCapability, OpenAIAdvisory
from plantlink.config import BridgeSettings, get_settings
from plantlink.core.errors import ChannelError
from plantlink.core.logging import create_logger
from plantlink.parsing.protocol import RequestTag, format_message
from plantlink.sync.controller import PropertyNames, SynchronizationController
from plantlink.sync.dispatcher import RequestDispatcher
from plantlink.transports.base import PropertyChannel
from plantlink.transports.cloud.transport import CloudChannel

logger = logging.getLogger(__name__)

GREETING_TEXT = "Enter the plant name to get care instructions, or request watering/diagnosis."


class Bridge:
    def __init__(
        self,
        channel: PropertyChannel,
        advisory: AdvisoryCapability,
        names: Optional[PropertyNames] = None,
        serialize_requests: bool = False,
    ) -> None:
        self.channel = channel
        self.advisory = advisory
        self.controller = SynchronizationController(channel, names)
        self.dispatcher = RequestDispatcher(self.controller, advisory, serialize_requests=serialize_requests)

    @classmethod
    def from_settings(cls, settings: BridgeSettings) -> "Bridge":
        channel = CloudChannel(
            device_id=settings.device_id,
            client_id=settings.client_id,
            client_secret=settings.secret_key,
            api_url=settings.cloud_api_url,
            token_url=settings.cloud_token_url,
            poll_interval=settings.poll_interval,
            timeout=settings.channel_timeout,
        )
        advisory = OpenAIAdvisory(
            api_key=settings.api_key,
            base_url=settings.advisory_base_url,
            model=settings.advisory_model,
            timeout=settings.advisory_timeout,
        )
        return cls(
            channel,
            advisory,
            names=PropertyNames(prompt=settings.prompt_property),
            serialize_requests=settings.serialize_requests,
        )

    @staticmethod
    def _log_property(name: str, value: Any) -> None:
        logger.info("property_changed", extra={"details": {"name": name, "value": value}})

    @staticmethod
    def _log_disconnect(message: str) -> None:
        # Reconnection is left to the channel.
        logger.error("channel_disconnected", extra={"details": {"message": message}})

    async def start(self) -> None:
        """Connect, greet on the prompt property and start consuming requests."""
        await self.channel.connect()
        logger.info("bridge_connected")
        self.channel.on_disconnect(self._log_disconnect)
        names = self.controller.names
        self.channel.on_property_value(names.prompt, self.dispatcher.submit)
        for name in names.config_properties():
            self.channel.on_property_value(name, partial(self._log_property, name))

        greeting = format_message(RequestTag.NAME_REQUEST, GREETING_TEXT)
        await self.controller.publish_reply(greeting)
        logger.info("greeting_sent", extra={"details": {"property": names.prompt, "value": greeting}})
        self.dispatcher.start()

    async def idle(self) -> None:
        await self.dispatcher.join()

    async def stop(self) -> None:
        await self.dispatcher.stop()
        await self.channel.close()
        close = getattr(self.advisory, "close", None)
        if close is not None:
            await close()

    async def run_forever(self) -> None:
        try:
            await self.start()
        except ChannelError:
            await self.stop()
            raise
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Bridge plant care requests between Arduino IoT Cloud and an AI advisor.")
    parser.add_argument("--serialize", action="store_true", help="Handle one request at a time.")
    parser.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except SettingsError as exc:
        create_logger("plantlink").error("settings_invalid", extra={"details": {"error": str(exc)}})
        return 2
    if args.serialize:
        settings = settings.model_copy(update={"serialize_requests": True})

    app_logger = create_logger("plantlink", settings.log_ring_size, (args.log_level or settings.log_level).upper())
    bridge = Bridge.from_settings(settings)
    try:
        asyncio.run(bridge.run_forever())
    except ChannelError as exc:
        app_logger.error("channel_connect_failed", extra={"details": {"error": str(exc)}})
        return 1
    except KeyboardInterrupt:
        app_logger.info("bridge_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
