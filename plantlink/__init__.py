from plantlink.bridge import Bridge
from plantlink.core.errors import (
    AdvisoryError,
    AdvisoryParseError,
    ChannelConnectError,
    ChannelError,
    ChannelPublishError,
    PlantlinkError,
    ValidationError,
)
from plantlink.domain import DeviceConfigState, DimmedLight, WaterSchedule
from plantlink.local_server_app import create_app, ServerSettings
from plantlink.local_server import LocalServer
from importlib.metadata import PackageNotFoundError, version

__all__ = [
    "Bridge",
    "AdvisoryError",
    "AdvisoryParseError",
    "ChannelConnectError",
    "ChannelError",
    "ChannelPublishError",
    "PlantlinkError",
    "ValidationError",
    "DeviceConfigState",
    "DimmedLight",
    "WaterSchedule",
    "LocalServer",
    "create_app",
    "ServerSettings",
]

try:
    __version__ = version("plantlink")
except PackageNotFoundError:
    __version__ = "0.0.0"
