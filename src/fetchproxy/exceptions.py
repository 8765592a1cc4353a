"""Error types raised by the proxy pipeline."""


class ProxyError(Exception):
    """Base error rendered as a plaintext response."""

    status_code = 500
    default_message = "Proxy error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingTargetURL(ProxyError):
    """The ``url`` query parameter is absent."""

    status_code = 400
    default_message = "Missing URL parameter"


class InvalidTargetURL(ProxyError):
    """The ``url`` query parameter is not an absolute http(s) URL."""

    status_code = 400
    default_message = "Invalid URL parameter"


class MalformedOptions(ProxyError):
    """A list-valued option could not be parsed."""

    status_code = 400
    default_message = "Malformed options"

    def __init__(self, parameter: str, reason: str):
        self.parameter = parameter
        super().__init__(f"Malformed {parameter} parameter: {reason}")


class UpstreamUnreachable(ProxyError):
    """The forwarding call failed before a response was received."""

    status_code = 502
    default_message = "Upstream unreachable"


class UpstreamTimeout(UpstreamUnreachable):
    status_code = 504
    default_message = "Upstream timed out"
