"""Query-string option parsing."""

import json
from typing import Mapping

import httpx
import structlog
from pydantic import ValidationError

from ..exceptions import InvalidTargetURL, MalformedOptions, MissingTargetURL
from ..models import ProxyOptions

logger = structlog.get_logger(__name__)

# query parameter -> ProxyOptions field
BOOLEAN_PARAMS = {
    "ignoreReqHeaders": "ignore_req_headers",
    "followRedirect": "follow_redirect",
    "redirectWithProxy": "redirect_with_proxy",
    "decompress": "decompress",
}

LIST_PARAMS = {
    "appendReqHeaders": "append_req_headers",
    "appendResHeaders": "append_res_headers",
    "deleteReqHeaders": "delete_req_headers",
    "deleteResHeaders": "delete_res_headers",
}


def parse_target_url(query_params: Mapping[str, str]) -> httpx.URL:
    """Return the absolute http(s) URL named by the ``url`` parameter."""
    raw = query_params.get("url")
    if not raw:
        raise MissingTargetURL()

    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as e:
        logger.warning("Rejected target URL", reason=str(e))
        raise InvalidTargetURL(f"Invalid URL parameter: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        logger.warning("Rejected target URL", scheme=url.scheme)
        raise InvalidTargetURL("Invalid URL parameter: expected an absolute http(s) URL")

    return url


def parse_options(query_params: Mapping[str, str]) -> ProxyOptions:
    """Build ProxyOptions from query parameters, failing on the first bad field."""
    values = {}

    for param, field in BOOLEAN_PARAMS.items():
        raw = query_params.get(param)
        if raw:
            # Equality, not a boolean parse: anything but "true" is false
            values[field] = raw == "true"

    for param, field in LIST_PARAMS.items():
        raw = query_params.get(param)
        if not raw:
            continue
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Rejected options", parameter=param, error=str(e))
            raise MalformedOptions(param, "invalid JSON") from e
        try:
            values[field] = getattr(ProxyOptions.model_validate({field: decoded}), field)
        except ValidationError as e:
            logger.warning("Rejected options", parameter=param, errors=e.error_count())
            shape = "[name, value] pairs" if field.startswith("append") else "header names"
            raise MalformedOptions(param, f"expected a JSON array of {shape}") from e

    return ProxyOptions(**values)
