"""Shared HTTP type definitions to avoid circular imports."""

import enum
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Iterable, Optional, Union

HeaderValue = Union[str, list[str]]

RESPONSE_STATUSES = frozenset(
    {
        HTTPStatus.OK,
        HTTPStatus.CREATED,
        HTTPStatus.BAD_REQUEST,
        HTTPStatus.NOT_FOUND,
        HTTPStatus.INTERNAL_SERVER_ERROR,
    }
)


class Method(enum.Enum):
    """HTTP methods recognized by the request parser."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def lookup(cls, token: str) -> Optional["Method"]:
        """Match a method token case-insensitively, returning None when unknown."""
        try:
            return cls(token.upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class HttpRequest:
    """Represents a parsed HTTP request."""

    method: Method
    path: str
    version: str
    headers: dict[str, HeaderValue]
    body: str

    def header(self, name: str) -> Optional[str]:
        """Return the first value recorded under an exact header name."""
        value = self.headers.get(name)
        if isinstance(value, list):
            return value[0] if value else None
        return value

    def header_values(self, name: str) -> list[str]:
        """Return every value recorded under an exact header name, in arrival order."""
        value = self.headers.get(name)
        if value is None:
            return []
        if isinstance(value, list):
            return list(value)
        return [value]


@dataclass
class HttpResponse:
    """Represents an HTTP response to be sent to a client."""

    status: HTTPStatus
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    body_iter: Optional[Iterable[bytes]] = None

    def __post_init__(self) -> None:
        if self.status not in RESPONSE_STATUSES:
            raise ValueError(f"Unsupported response status: {self.status!r}")

    @property
    def status_line(self) -> str:
        return f"HTTP/1.1 {self.status.value} {self.status.phrase}"
