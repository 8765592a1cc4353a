"""fetchproxy - single-hop HTTP forwarding proxy."""

__version__ = "0.1.0"

from .app import app, create_app
from .config import Settings
from .exceptions import (
    InvalidTargetURL,
    MalformedOptions,
    MissingTargetURL,
    ProxyError,
    UpstreamTimeout,
    UpstreamUnreachable,
)
from .headers import HeaderSet
from .models import ProxyOptions
from .services import Forwarder, ProxyService

__all__ = [
    "HeaderSet",
    "ProxyOptions",
    "ProxyService",
    "Forwarder",
    "Settings",
    "ProxyError",
    "MissingTargetURL",
    "InvalidTargetURL",
    "MalformedOptions",
    "UpstreamUnreachable",
    "UpstreamTimeout",
    "app",
    "create_app",
]
