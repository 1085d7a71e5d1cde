from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx

from plantlink.core.errors import AdvisoryError

logger = logging.getLogger(__name__)


class AdvisoryCapability(Protocol):
    async def complete(self, system_instruction: str, user_text: str) -> str:
        """Return the backend's free-text answer to ``user_text``."""


class OpenAIAdvisory:
    """Chat completions client for OpenAI-compatible endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-3.5-turbo",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _client_instance(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Authorization": f"Bearer {self.api_key}"},
                transport=self._transport,
            )
        return self._client

    async def complete(self, system_instruction: str, user_text: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_text},
            ],
        }
        client = await self._client_instance()
        try:
            resp = await client.post("/chat/completions", json=payload)
            resp.raise_for_status()
            data: Any = resp.json()
        except httpx.HTTPError as exc:
            logger.warning("advisory_request_failed", extra={"details": {"error": str(exc)}})
            raise AdvisoryError(f"Advisory request failed: {exc}") from exc
        except ValueError as exc:
            raise AdvisoryError(f"Advisory response is not JSON: {exc}") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AdvisoryError("Advisory response has no message content") from exc
        if not isinstance(content, str):
            raise AdvisoryError("Advisory response has no message content")
        logger.debug("advisory_completed", extra={"details": {"model": data.get("model", self.model)}})
        return content

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
