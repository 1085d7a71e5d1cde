from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request

from plantlink.advisory.client import AdvisoryCapability, OpenAIAdvisory
from plantlink.bridge import Bridge
from plantlink.core.logging import create_logger, get_ring_buffer
from plantlink.local_server_app.config import ServerSettings, get_settings
from plantlink.local_server_app.models import (
    HealthResponse,
    LogsResponse,
    PropertiesResponse,
    PropertyResponse,
    PropertyWriteRequest,
)
from plantlink.sync.controller import PropertyNames
from plantlink.transports.local.transport import LocalChannel


def _build_advisory(settings: ServerSettings) -> AdvisoryCapability:
    if not settings.api_key:
        raise ValueError("OPENAI_API_KEY is required unless an advisory backend is injected")
    return OpenAIAdvisory(
        api_key=settings.api_key,
        base_url=settings.advisory_base_url,
        model=settings.advisory_model,
        timeout=settings.advisory_timeout,
    )


def create_app(settings: Optional[ServerSettings] = None, advisory: Optional[AdvisoryCapability] = None) -> FastAPI:
    settings = settings or get_settings()
    advisory = advisory or _build_advisory(settings)
    logger = create_logger("plantlink", settings.log_ring_size)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        channel = LocalChannel()
        bridge = Bridge(
            channel,
            advisory,
            names=PropertyNames(prompt=settings.prompt_property),
            serialize_requests=settings.serialize_requests,
        )
        await bridge.start()
        app.state.channel = channel
        app.state.bridge = bridge
        logger.info("local_server_started", extra={"details": {"ip": settings.server_ip, "port": settings.server_port}})
        try:
            yield
        finally:
            await bridge.stop()

    app = FastAPI(title="plantlink local server", lifespan=lifespan)

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request) -> HealthResponse:
        bridge: Bridge = request.app.state.bridge
        return HealthResponse(
            status="ok",
            connected=request.app.state.channel.connected,
            dispatcher=bridge.dispatcher.state.value,
        )

    @app.get("/properties", response_model=PropertiesResponse)
    async def get_properties(request: Request) -> PropertiesResponse:
        return PropertiesResponse(properties=dict(request.app.state.channel.properties))

    @app.get("/properties/{name}", response_model=PropertyResponse)
    async def get_property(name: str, request: Request) -> PropertyResponse:
        properties = request.app.state.channel.properties
        if name not in properties:
            raise HTTPException(status_code=404, detail=f"Unknown property '{name}'")
        return PropertyResponse(name=name, value=properties[name])

    @app.post("/properties/{name}", response_model=PropertyResponse, status_code=202)
    async def write_property(name: str, body: PropertyWriteRequest, request: Request, wait: bool = False) -> PropertyResponse:
        channel: LocalChannel = request.app.state.channel
        await channel.write(name, body.value)
        if wait:
            await request.app.state.bridge.idle()
        return PropertyResponse(name=name, value=channel.properties.get(name))

    @app.get("/config")
    async def get_config(request: Request) -> dict:
        return request.app.state.bridge.controller.snapshot()

    @app.get("/logs", response_model=LogsResponse)
    async def get_logs() -> LogsResponse:
        ring = get_ring_buffer(logger)
        return LogsResponse(events=ring.get_events() if ring else [])

    return app
