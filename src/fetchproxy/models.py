"""Data models for fetchproxy."""

import re
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, List, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from .headers import HeaderSet

# RFC 9110 field-name token
HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class ProxyOptions(BaseModel):
    """Request-shaping options read from the inbound query string."""

    ignore_req_headers: bool = Field(
        False, description="Do not copy the caller's headers upstream"
    )
    follow_redirect: bool = Field(
        True, description="Let the HTTP client follow upstream redirects"
    )
    redirect_with_proxy: bool = Field(
        True, description="Redirect the caller to an upstream Location"
    )
    decompress: bool = Field(
        False, description="Buffer and decode the upstream body"
    )
    append_req_headers: List[Tuple[str, str]] = Field(
        default_factory=list, description="Headers set on the upstream request"
    )
    append_res_headers: List[Tuple[str, str]] = Field(
        default_factory=list, description="Headers set on the caller response"
    )
    delete_req_headers: List[str] = Field(
        default_factory=list, description="Headers removed from the upstream request"
    )
    delete_res_headers: List[str] = Field(
        default_factory=list, description="Headers removed from the caller response"
    )

    @field_validator("append_req_headers", "append_res_headers")
    @classmethod
    def validate_pairs(cls, pairs: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
        """Lowercase names and reject pairs that cannot be sent as a header."""
        for name, value in pairs:
            if not HEADER_NAME.fullmatch(name):
                raise ValueError(f"invalid header name {name!r}")
            try:
                value.encode("latin-1")
            except UnicodeEncodeError as e:
                raise ValueError(f"header value for {name!r} is not latin-1") from e
            if any(c in value for c in "\r\n\0"):
                raise ValueError(f"header value for {name!r} contains a control character")
        return [(name.lower(), value) for name, value in pairs]

    @field_validator("delete_req_headers", "delete_res_headers")
    @classmethod
    def lowercase_names(cls, names: List[str]) -> List[str]:
        return [name.lower() for name in names]


@dataclass
class StreamedBody:
    """Upstream body relayed chunk by chunk without decoding."""

    chunks: AsyncIterator[bytes]
    aclose: Callable[[], Awaitable[None]]


@dataclass
class BufferedBody:
    """Upstream body read fully into memory and content-decoded."""

    content: bytes


ResponseBody = Union[StreamedBody, BufferedBody]


@dataclass
class ProxyResult:
    """Transformed upstream response ready to be emitted."""

    status_code: int
    reason_phrase: str
    headers: HeaderSet
    body: ResponseBody


@dataclass
class RedirectResult:
    """Redirect sending the caller straight to the upstream location."""

    location: str
    status_code: int = 302
