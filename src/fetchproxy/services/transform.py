"""Header and body transformation rules for the proxy pipeline."""

from typing import Iterable, Optional, Tuple

import httpx

from ..headers import HeaderSet
from ..models import BufferedBody, ProxyOptions, RedirectResult

# Headers describing a single connection or the framing of a request body.
# The forwarded request is a body-less GET, so none of these carry over.
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-connection",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
})

REQUEST_SKIP_HEADERS = HOP_BY_HOP_HEADERS | {"content-length"}

CORS_HEADERS = (
    ("access-control-allow-origin", "*"),
    ("access-control-allow-methods", "GET,HEAD,POST,OPTIONS"),
    ("access-control-max-age", "86400"),
)

# Codings httpx decodes on read with the brotli and zstd extras installed
DECODED_CODINGS = frozenset({"gzip", "deflate", "br", "zstd", "identity"})

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


def host_header(url: httpx.URL) -> str:
    """Host header value for a URL, with the port when it is not the default.

    Internationalized names are given in their IDNA (punycode) form.
    """
    return url.netloc.decode("ascii")


def _set_each(headers: HeaderSet, pairs: Iterable[Tuple[str, str]]) -> None:
    for name, value in pairs:
        headers.set(name, value)


def build_request_headers(
    inbound: Iterable[Tuple[str, str]], options: ProxyOptions, target_url: httpx.URL
) -> HeaderSet:
    """Headers sent upstream."""
    headers = HeaderSet()

    if not options.ignore_req_headers:
        for name, value in inbound:
            if name.lower() not in REQUEST_SKIP_HEADERS:
                headers.append(name, value)

    _set_each(headers, options.append_req_headers)

    for name in options.delete_req_headers:
        headers.delete(name)

    headers.set("host", host_header(target_url))
    return headers


def build_response_headers(
    upstream: Iterable[Tuple[str, str]], options: ProxyOptions
) -> HeaderSet:
    """Headers returned to the caller."""
    headers = HeaderSet()
    for name, value in upstream:
        if name.lower() not in HOP_BY_HOP_HEADERS:
            headers.append(name, value)

    _set_each(headers, options.append_res_headers)

    if options.delete_res_headers:
        for name in options.delete_res_headers:
            headers.delete(name)
        for name, _ in CORS_HEADERS:
            headers.delete(name)

    # Appended after deletion so deleteResHeaders never removes them
    for name, value in CORS_HEADERS:
        headers.append(name, value)

    return headers


def buffer_body(headers: HeaderSet, content: bytes) -> BufferedBody:
    """Adjust headers for a decoded, in-memory body.

    The body has already been read through the HTTP client, which undoes every
    coding it supports and skips the rest. ``content-encoding`` keeps only the
    codings still applied to the bytes, and ``content-length`` is reset to the
    buffered size.
    """
    codings = [
        coding.strip().lower()
        for value in headers.get_all("content-encoding")
        for coding in value.split(",")
        if coding.strip()
    ]
    if codings:
        remaining = [c for c in codings if c not in DECODED_CODINGS]
        if remaining:
            headers.set("content-encoding", ", ".join(remaining))
        else:
            headers.delete("content-encoding")
    headers.set("content-length", str(len(content)))
    return BufferedBody(content=content)


def intercept_redirect(
    headers: HeaderSet, status_code: int, options: ProxyOptions
) -> Optional[RedirectResult]:
    """Redirect the caller to the upstream Location instead of relaying."""
    if not options.redirect_with_proxy:
        return None

    location = headers.get("location")
    if not location:
        return None

    if status_code not in REDIRECT_STATUSES:
        status_code = 302
    return RedirectResult(location=location, status_code=status_code)
