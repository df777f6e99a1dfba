"""Exceptions raised while reading and parsing a request."""


class ReadError(Exception):
    """Raised when the socket read fails or the bytes are not valid UTF-8."""


class RequestParseError(ValueError):
    """Base class for requests that cannot be turned into an HttpRequest."""


class MalformedRequestLine(RequestParseError):
    """Raised when the request line lacks distinct method/path/version separators."""


class UnknownMethod(RequestParseError):
    """Raised when the method token is not a supported HTTP method."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown HTTP method: {token!r}")
        self.token = token


class InvalidContentLength(RequestParseError):
    """Raised when a declared Content-Length is not a non-negative integer."""
