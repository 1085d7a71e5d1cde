"""
FastAPI application that runs the bridge on an in-memory property store so
the prompt protocol can be exercised over HTTP without cloud credentials.
"""
from plantlink.local_server_app.api import create_app
from plantlink.local_server_app.config import ServerSettings

__all__ = ["create_app", "ServerSettings"]
