"""Services module for fetchproxy."""

from .forwarder import Forwarder, UpstreamResponse
from .options import parse_options, parse_target_url
from .proxy_service import ProxyService

__all__ = [
    "Forwarder",
    "UpstreamResponse",
    "ProxyService",
    "parse_options",
    "parse_target_url",
]
