"""Pytest configuration and fixtures."""

import httpx
import pytest
from fastapi.testclient import TestClient

from fetchproxy.app import app
from fetchproxy.routers.proxy import get_proxy_service
from fetchproxy.services import Forwarder, ProxyService


class Upstream:
    """Scripted upstream server backed by httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, tuple] = {}
        self.error: Exception | None = None

    def respond(self, url: str, status_code: int = 200, headers=None, body: bytes = b""):
        """Register a response; the body is streamed, not preloaded."""
        self.routes[url] = (status_code, headers or [], body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        status_code, headers, body = self.routes.get(
            str(request.url), (404, [], b"not found")
        )
        return httpx.Response(
            status_code, headers=headers, stream=httpx.ByteStream(body)
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def upstream():
    """Scripted upstream server."""
    return Upstream()


@pytest.fixture
def forwarder(upstream):
    """Forwarder wired to the scripted upstream."""
    return Forwarder(transport=upstream.transport, timeout=5.0, max_redirects=5)


@pytest.fixture
def client(forwarder):
    """FastAPI test client proxying to the scripted upstream."""
    app.dependency_overrides[get_proxy_service] = lambda: ProxyService(forwarder)
    yield TestClient(app)
    app.dependency_overrides.clear()
