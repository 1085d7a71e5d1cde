"""
Tagged text protocol shared by requests and replies on the prompt property.
"""
from plantlink.parsing.protocol.codec import (
    DecodedRequest,
    RequestTag,
    format_message,
    parse_message,
    PING_PREFIX,
)

__all__ = [
    "DecodedRequest",
    "RequestTag",
    "format_message",
    "parse_message",
    "PING_PREFIX",
]
