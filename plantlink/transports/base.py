"""Property channel interface."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, Union

PropertyCallback = Callable[[Any], Union[None, Awaitable[None]]]
DisconnectCallback = Callable[[str], None]


class PropertyChannel(Protocol):
    async def connect(self) -> None:
        """Open the session. Raises ``ChannelConnectError`` when that is not possible."""

    async def close(self) -> None:
        ...

    async def send_property(self, name: str, value: Any) -> None:
        """Publish a property value. Raises ``ChannelPublishError`` on failure."""

    def on_property_value(self, name: str, callback: PropertyCallback) -> None:
        """Call ``callback(value)`` whenever ``name`` changes remotely."""

    def on_disconnect(self, callback: DisconnectCallback) -> None:
        ...
