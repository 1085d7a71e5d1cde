"""
Request dispatcher for the prompt property.

Inbound values are queued and consumed by a single loop in arrival order.
By default each request is handled in its own task, so a second request can
be routed while the first one still waits on the advisory backend; two
concurrent name requests then race and the later ``apply_config`` wins.
With ``serialize_requests`` the loop waits for each handler before taking
the next value.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from plantlink.advisory.client import AdvisoryCapability
from plantlink.advisory.prompts import DIAGNOSIS_SYSTEM_INSTRUCTION
from plantlink.advisory.resolver import CareInstructionResolver
from plantlink.core.errors import ChannelError, PlantlinkError
from plantlink.domain.state import DeviceConfigState, PropertyEvent
from plantlink.parsing.protocol import DecodedRequest, RequestTag, format_message, parse_message
from plantlink.sync.controller import SynchronizationController

logger = logging.getLogger(__name__)

UNKNOWN_REQUEST_TEXT = "Unknown request type. Please try again."
WATER_FALLBACK_TEXT = "Watering now..."


class DispatcherState(str, Enum):
    IDLE = "idle"
    ROUTING = "routing"
    NAME_HANDLING = "name_handling"
    WATER_HANDLING = "water_handling"
    DIAGNOSIS_HANDLING = "diagnosis_handling"
    UNKNOWN_HANDLING = "unknown_handling"
    RESPONDING = "responding"


HANDLING_STATES: dict[RequestTag, DispatcherState] = {
    RequestTag.NAME_REQUEST: DispatcherState.NAME_HANDLING,
    RequestTag.WATER_REQUEST: DispatcherState.WATER_HANDLING,
    RequestTag.DIAGNOSIS_REQUEST: DispatcherState.DIAGNOSIS_HANDLING,
}


def care_summary(plant_name: str, state: DeviceConfigState) -> str:
    return (
        f"Plant: {plant_name}\n"
        f"- Ideal Soil Moisture Threshold: {state.moisture_threshold}%\n"
        f"- Lighting Frequency: {state.lighting_frequency} hours/day\n"
        f"- Lighting Duration: {state.lighting_duration} hours\n"
        f"- Watering Frequency: Every {state.watering_frequency} days\n"
        f"- Watering Duration: {state.watering_duration} seconds\n"
        f"\n"
        f"Care settings updated successfully!"
    )


def error_text(exc: BaseException) -> str:
    return f"Error processing request: {exc}. Please try again."


class RequestDispatcher:
    def __init__(
        self,
        controller: SynchronizationController,
        advisory: AdvisoryCapability,
        resolver: Optional[CareInstructionResolver] = None,
        serialize_requests: bool = False,
    ) -> None:
        self.controller = controller
        self.advisory = advisory
        self.resolver = resolver or CareInstructionResolver(advisory)
        self.serialize_requests = serialize_requests
        self.state = DispatcherState.IDLE
        self._handlers: dict[RequestTag, Callable[[str], Awaitable[str]]] = {
            RequestTag.NAME_REQUEST: self._handle_name,
            RequestTag.WATER_REQUEST: self._handle_water,
            RequestTag.DIAGNOSIS_REQUEST: self._handle_diagnosis,
        }
        self._queue: asyncio.Queue[PropertyEvent] = asyncio.Queue()
        self._tasks: set[asyncio.Task] = set()
        self._loop_task: Optional[asyncio.Task] = None

    def _transition(self, state: DispatcherState, tag: Optional[int] = None) -> None:
        self.state = state
        logger.debug("dispatcher_state", extra={"details": {"state": state.value, "tag": tag}})

    # ---- handlers ----
    async def _handle_name(self, plant_name: str) -> str:
        state = await self.resolver.resolve(plant_name)
        await self.controller.apply_config(state)
        return care_summary(plant_name, state)

    async def _handle_water(self, details: str) -> str:
        # Actuation belongs to the firmware; only acknowledge here.
        logger.info("water_request", extra={"details": {"content": details}})
        return f"Manual watering initiated. {details or WATER_FALLBACK_TEXT}"

    async def _handle_diagnosis(self, symptoms: str) -> str:
        diagnosis = await self.advisory.complete(DIAGNOSIS_SYSTEM_INSTRUCTION, symptoms)
        return f"Plant Diagnosis:\n{diagnosis}".strip()

    # ---- request cycle ----
    async def handle(self, request: DecodedRequest) -> str:
        """Route one request, publish the reply on the prompt property and return it."""
        self._transition(DispatcherState.ROUTING, request.tag)
        request_tag = request.request_tag
        handler = self._handlers.get(request_tag) if request_tag is not None else None

        if handler is None:
            self._transition(DispatcherState.UNKNOWN_HANDLING, request.tag)
            logger.warning("unknown_request_tag", extra={"details": {"tag": request.tag}})
            text = UNKNOWN_REQUEST_TEXT
        else:
            self._transition(HANDLING_STATES[request_tag], request.tag)
            try:
                text = await handler(request.content)
            except PlantlinkError as exc:
                logger.warning(
                    "request_failed",
                    extra={"details": {"tag": request.tag, "error": str(exc), "type": type(exc).__name__}},
                )
                text = error_text(exc)
            except Exception as exc:
                logger.exception("request_crashed", extra={"details": {"tag": request.tag}})
                text = error_text(exc)

        self._transition(DispatcherState.RESPONDING, request.tag)
        reply = format_message(request.tag, text)
        try:
            await self.controller.publish_reply(reply)
        except ChannelError as exc:
            logger.error("reply_publish_failed", extra={"details": {"tag": request.tag, "error": str(exc)}})
        finally:
            self._transition(DispatcherState.IDLE, request.tag)
        return reply

    # ---- event loop ----
    def submit(self, value: Any) -> None:
        self._queue.put_nowait(PropertyEvent(name=self.controller.names.prompt, value=value))

    async def run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                request = parse_message(event.value)
                logger.info(
                    "request_received",
                    extra={"details": {"tag": request.tag, "content": request.content}},
                )
                if self.serialize_requests:
                    await self.handle(request)
                else:
                    task = asyncio.create_task(self.handle(request), name=f"request-{request.tag}")
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
            finally:
                self._queue.task_done()

    def start(self) -> None:
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self.run(), name="request-dispatcher")

    async def join(self) -> None:
        """Wait until every queued request has been handled."""
        await self._queue.join()
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def stop(self) -> None:
        if self._loop_task:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
