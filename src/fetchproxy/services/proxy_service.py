"""Request/response transformation pipeline."""

from typing import Iterable, Mapping, Tuple, Union

import structlog

from ..models import ProxyResult, RedirectResult, StreamedBody
from .forwarder import Forwarder
from .options import parse_options, parse_target_url
from .transform import (
    buffer_body,
    build_request_headers,
    build_response_headers,
    intercept_redirect,
)

logger = structlog.get_logger(__name__)


class ProxyService:
    """Runs one proxied request from query parameters to emitted result."""

    def __init__(self, forwarder: Forwarder | None = None):
        self.logger = logger.bind(component="ProxyService")
        self.forwarder = forwarder or Forwarder()

    async def handle(
        self,
        query_params: Mapping[str, str],
        inbound_headers: Iterable[Tuple[str, str]],
    ) -> Union[ProxyResult, RedirectResult]:
        """Parse options, forward upstream and transform the response.

        Option and URL errors are raised before any forwarding happens.
        Upstream failures surface as ``UpstreamUnreachable``.
        """
        target_url = parse_target_url(query_params)
        options = parse_options(query_params)

        request_headers = build_request_headers(inbound_headers, options, target_url)
        upstream = await self.forwarder.fetch(
            target_url, request_headers, follow_redirects=options.follow_redirect
        )

        try:
            response_headers = build_response_headers(upstream.headers, options)

            redirect = intercept_redirect(
                response_headers, upstream.status_code, options
            )
            if redirect is not None:
                await upstream.aclose()
                self.logger.info(
                    "Redirecting caller to upstream location",
                    status=redirect.status_code,
                    location=redirect.location,
                )
                return redirect

            if options.decompress:
                body = buffer_body(response_headers, await upstream.read())
            else:
                body = StreamedBody(chunks=upstream.iter_raw(), aclose=upstream.aclose)
        except Exception:
            await upstream.aclose()
            raise

        return ProxyResult(
            status_code=upstream.status_code,
            reason_phrase=upstream.reason_phrase,
            headers=response_headers,
            body=body,
        )
