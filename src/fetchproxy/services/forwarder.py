"""Forwarding call to the upstream server."""

from typing import AsyncIterator, Optional

import httpx
import structlog

from ..config import settings
from ..exceptions import UpstreamTimeout, UpstreamUnreachable
from ..headers import HeaderSet

logger = structlog.get_logger(__name__)


def encode_header(name: str, value: str) -> tuple[bytes, bytes]:
    """Wire form of a header pair carried as latin-1 text."""
    return name.encode("latin-1"), value.encode("latin-1")


class UpstreamResponse:
    """Streaming upstream response that owns its HTTP client."""

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self._response = response
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def reason_phrase(self) -> str:
        return self._response.reason_phrase

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Header pairs as received, duplicates preserved.

        Values are latin-1 decoded so every octet maps back to itself.
        """
        return [
            (name.decode("latin-1"), value.decode("latin-1"))
            for name, value in self._response.headers.raw
        ]

    @property
    def url(self) -> httpx.URL:
        return self._response.url

    async def read(self) -> bytes:
        """Read and decode the whole body, then release the connection."""
        try:
            return await self._response.aread()
        except httpx.TimeoutException as e:
            raise UpstreamTimeout() from e
        except httpx.RequestError as e:
            raise UpstreamUnreachable(f"Upstream body read failed: {e}") from e
        finally:
            await self.aclose()

    async def iter_raw(self) -> AsyncIterator[bytes]:
        """Yield the body bytes exactly as received."""
        try:
            async for chunk in self._response.aiter_raw():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()
        await self._client.aclose()


class Forwarder:
    """Issues the single GET request to the upstream server."""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
    ):
        self.logger = logger.bind(component="Forwarder")
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.upstream_timeout
        self._max_redirects = (
            max_redirects if max_redirects is not None else settings.max_redirects
        )

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(self._timeout),
            max_redirects=self._max_redirects,
        )

    async def fetch(
        self, url: httpx.URL, headers: HeaderSet, follow_redirects: bool
    ) -> UpstreamResponse:
        """Send the request and return once upstream response headers arrive."""
        self.logger.info(
            "Forwarding request",
            target=str(url),
            follow_redirects=follow_redirects,
        )

        client = self._create_client()
        try:
            request = client.build_request(
                "GET", url, headers=[encode_header(n, v) for n, v in headers]
            )
            response = await client.send(
                request, stream=True, follow_redirects=follow_redirects
            )
        except httpx.TimeoutException as e:
            await client.aclose()
            self.logger.error("Upstream timed out", target=str(url), error=str(e))
            raise UpstreamTimeout() from e
        except httpx.HTTPError as e:
            await client.aclose()
            self.logger.error("Upstream unreachable", target=str(url), error=str(e))
            raise UpstreamUnreachable(f"Upstream unreachable: {e}") from e
        except Exception:
            await client.aclose()
            raise

        self.logger.info(
            "Upstream responded", target=str(url), status=response.status_code
        )
        return UpstreamResponse(client, response)
