from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class PropertyWriteRequest(BaseModel):
    value: Any


class PropertyResponse(BaseModel):
    name: str
    value: Any = None


class PropertiesResponse(BaseModel):
    properties: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    connected: bool
    dispatcher: str


class LogsResponse(BaseModel):
    events: List[Dict[str, Any]] = Field(default_factory=list)
