"""Catch-all proxy endpoint."""

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from ..models import BufferedBody, ProxyResult, RedirectResult, StreamedBody
from ..services import ProxyService

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["proxy"])

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_proxy_service() -> ProxyService:
    """Get proxy service instance."""
    return ProxyService()


def _first_values(request: Request) -> dict[str, str]:
    """First value of each query parameter."""
    params: dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, value)
    return params


def _emit(result: ProxyResult | RedirectResult) -> Response:
    """Turn a pipeline result into the response sent to the caller.

    Header values are latin-1 text, so appending them restores the exact
    upstream octets.
    """
    if isinstance(result, RedirectResult):
        response = Response(status_code=result.status_code)
        response.headers.append("location", result.location)
        return response

    if isinstance(result.body, BufferedBody):
        response = Response(content=result.body.content, status_code=result.status_code)
    else:
        response = StreamingResponse(
            result.body.chunks,
            status_code=result.status_code,
            background=BackgroundTask(result.body.aclose),
        )

    # Response already framed content-length for buffered bodies
    framed = "content-length" in response.headers
    for name, value in result.headers:
        if name == "content-length" and framed:
            continue
        response.headers.append(name, value)
    return response


@router.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(request: Request, service: ProxyService = Depends(get_proxy_service)):
    """Forward the request named by the ``url`` query parameter."""
    # Starlette decodes header values as latin-1, keeping the caller's octets
    result = await service.handle(_first_values(request), request.headers.items())
    try:
        return _emit(result)
    except Exception:
        if isinstance(result, ProxyResult) and isinstance(result.body, StreamedBody):
            await result.body.aclose()
        raise
