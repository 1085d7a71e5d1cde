from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Optional

from plantlink.core.errors import ChannelConnectError, ChannelPublishError
from plantlink.transports.base import DisconnectCallback, PropertyCallback

logger = logging.getLogger(__name__)


class LocalChannel:
    """
    In-memory property store.

    Values published by the bridge are only stored; values written through
    ``write`` behave like dashboard edits and notify subscribers.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None) -> None:
        self.properties: dict[str, Any] = dict(initial or {})
        self.published: list[tuple[str, Any]] = []
        self.connected = False
        self._subscribers: dict[str, list[PropertyCallback]] = defaultdict(list)
        self._disconnect_callbacks: list[DisconnectCallback] = []

    async def connect(self) -> None:
        if self.connected:
            raise ChannelConnectError("Local channel already connected")
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    async def send_property(self, name: str, value: Any) -> None:
        if not self.connected:
            raise ChannelPublishError(f"Cannot publish '{name}': channel not connected")
        self.properties[name] = value
        self.published.append((name, value))
        logger.debug("property_published", extra={"details": {"name": name, "value": value}})

    def on_property_value(self, name: str, callback: PropertyCallback) -> None:
        self._subscribers[name].append(callback)

    def on_disconnect(self, callback: DisconnectCallback) -> None:
        self._disconnect_callbacks.append(callback)

    async def write(self, name: str, value: Any) -> None:
        self.properties[name] = value
        for callback in list(self._subscribers.get(name, [])):
            result = callback(value)
            if inspect.isawaitable(result):
                await result

    def disconnect(self, message: str = "local disconnect") -> None:
        self.connected = False
        for callback in list(self._disconnect_callbacks):
            callback(message)

    def published_values(self, name: str) -> list[Any]:
        return [value for prop, value in self.published if prop == name]
