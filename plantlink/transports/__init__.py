"""
Property channel implementations.

- ``cloud``: Arduino IoT Cloud REST API with polling for inbound changes.
- ``local``: In-memory store used by the local server and tests.
"""
from plantlink.transports.base import PropertyChannel
from plantlink.transports.cloud.transport import CloudChannel
from plantlink.transports.local.transport import LocalChannel

__all__ = ["PropertyChannel", "CloudChannel", "LocalChannel"]
