from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections import defaultdict
from typing import Any, Optional

import httpx

from plantlink.core.errors import ChannelConnectError, ChannelPublishError
from plantlink.transports.base import DisconnectCallback, PropertyCallback

logger = logging.getLogger(__name__)

API_URL = "https://api2.arduino.cc/iot"
TOKEN_URL = "https://api2.arduino.cc/iot/v1/clients/token"
TOKEN_REFRESH_MARGIN = 60.0

_UNSET = object()


class CloudChannel:
    """
    Arduino IoT Cloud property channel over the REST API.

    Properties are addressed by their variable name. Inbound changes are
    detected by polling the thing's property list; values this channel
    published itself are not reported back to subscribers. A ``poll_interval``
    of 0 disables the background poll; call ``poll_once`` instead.
    """

    def __init__(
        self,
        device_id: str,
        client_id: Optional[str],
        client_secret: str,
        api_url: str = API_URL,
        token_url: str = TOKEN_URL,
        poll_interval: float = 2.0,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.device_id = device_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_url = api_url.rstrip("/")
        self.token_url = token_url
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        self.thing_id: Optional[str] = None
        self.property_ids: dict[str, str] = {}
        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0

        self._subscribers: dict[str, list[PropertyCallback]] = defaultdict(list)
        self._disconnect_callbacks: list[DisconnectCallback] = []
        self._seen: dict[str, tuple[Any, Any]] = {}
        self._own_values: dict[str, Any] = {}
        self._online = False

        self._stop_event = asyncio.Event()
        self._poll_task: Optional[asyncio.Task] = None

    # ---- helpers ----
    async def _client_instance(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def _ensure_token(self) -> str:
        if self._access_token and time.monotonic() < self._token_expires_at - TOKEN_REFRESH_MARGIN:
            return self._access_token
        client = await self._client_instance()
        resp = await client.post(
            self.token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "audience": self.api_url,
            },
        )
        resp.raise_for_status()
        data = resp.json()
        self._access_token = data["access_token"]
        self._token_expires_at = time.monotonic() + float(data.get("expires_in", 300))
        return self._access_token

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        token = await self._ensure_token()
        client = await self._client_instance()
        resp = await client.request(
            method,
            f"{self.api_url}{path}",
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
            json=json,
        )
        resp.raise_for_status()
        return resp.json() if resp.content else None

    async def _list_properties(self) -> list[dict[str, Any]]:
        props = await self._request("GET", f"/v2/things/{self.thing_id}/properties")
        return props or []

    @staticmethod
    def _variable_name(prop: dict[str, Any]) -> Optional[str]:
        return prop.get("variable_name") or prop.get("name")

    def _index(self, props: list[dict[str, Any]]) -> None:
        for prop in props:
            name = self._variable_name(prop)
            if name and prop.get("id"):
                self.property_ids[name] = prop["id"]

    # ---- PropertyChannel ----
    async def connect(self) -> None:
        if not self.client_id:
            raise ChannelConnectError("ARDUINO_CLOUD_CLIENTID is required for the cloud REST channel")
        try:
            device = await self._request("GET", f"/v2/devices/{self.device_id}")
            thing = (device or {}).get("thing") or {}
            self.thing_id = thing.get("id")
            if not self.thing_id:
                raise ChannelConnectError(f"Device {self.device_id} is not attached to a thing")
            props = await self._list_properties()
        except httpx.HTTPError as exc:
            raise ChannelConnectError(f"Could not connect to Arduino IoT Cloud: {exc}") from exc
        except (KeyError, ValueError) as exc:
            raise ChannelConnectError(f"Unexpected Arduino IoT Cloud response: {exc}") from exc

        self._index(props)
        for prop in props:
            name = self._variable_name(prop)
            if name:
                self._seen[name] = (prop.get("last_value"), prop.get("value_updated_at"))
        self._online = True
        logger.info(
            "channel_connected",
            extra={"details": {"device_id": self.device_id, "thing_id": self.thing_id, "properties": len(props)}},
        )
        if self.poll_interval > 0 and (self._poll_task is None or self._poll_task.done()):
            self._stop_event.clear()
            self._poll_task = asyncio.create_task(self._poll_job(), name="cloud-property-poll")

    async def close(self) -> None:
        self._stop_event.set()
        if self._poll_task:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None
        if self._client:
            await self._client.aclose()
            self._client = None
        self._online = False

    async def send_property(self, name: str, value: Any) -> None:
        try:
            property_id = self.property_ids.get(name)
            if property_id is None:
                self._index(await self._list_properties())
                property_id = self.property_ids.get(name)
            if property_id is None:
                raise ChannelPublishError(f"Thing {self.thing_id} has no property '{name}'")
            self._own_values[name] = value
            await self._request(
                "PUT",
                f"/v2/things/{self.thing_id}/properties/{property_id}/publish",
                json={"value": value},
            )
        except httpx.HTTPError as exc:
            self._own_values.pop(name, None)
            raise ChannelPublishError(f"Failed to publish '{name}': {exc}") from exc

    def on_property_value(self, name: str, callback: PropertyCallback) -> None:
        self._subscribers[name].append(callback)

    def on_disconnect(self, callback: DisconnectCallback) -> None:
        self._disconnect_callbacks.append(callback)

    # ---- polling ----
    async def poll_once(self) -> None:
        props = await self._list_properties()
        self._index(props)
        for prop in props:
            name = self._variable_name(prop)
            if not name or name not in self._subscribers:
                continue
            value = prop.get("last_value")
            marker = (value, prop.get("value_updated_at"))
            if self._seen.get(name) == marker:
                continue
            self._seen[name] = marker
            if self._own_values.get(name, _UNSET) == value:
                self._own_values.pop(name, None)
                continue
            for callback in list(self._subscribers[name]):
                result = callback(value)
                if inspect.isawaitable(result):
                    await result

    def _notify_disconnect(self, message: str) -> None:
        for callback in list(self._disconnect_callbacks):
            callback(message)

    async def _poll_job(self) -> None:
        while not self._stop_event.is_set():
            try:
                await self.poll_once()
                if not self._online:
                    self._online = True
                    logger.info("channel_reconnected", extra={"details": {"thing_id": self.thing_id}})
            except (httpx.HTTPError, KeyError, ValueError) as exc:
                if self._online:
                    self._online = False
                    self._notify_disconnect(str(exc))
            except Exception as exc:
                logger.error("poll_failed", extra={"details": {"thing_id": self.thing_id, "error": repr(exc)}})
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                continue
