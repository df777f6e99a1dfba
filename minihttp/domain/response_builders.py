"""Pure HTTP response builders."""

from http import HTTPStatus
from typing import Iterable

from minihttp.domain.http_types import HttpResponse


def empty_response() -> HttpResponse:
    """Return a 200 OK response with no headers and no body."""
    return HttpResponse(HTTPStatus.OK)


def text_response(message: str) -> HttpResponse:
    """Return a text/plain 200 response whose Content-Length counts encoded bytes."""
    payload = message.encode()
    headers = [
        ("Content-Type", "text/plain"),
        ("Content-Length", str(len(payload))),
    ]
    return HttpResponse(HTTPStatus.OK, headers, payload)


def octet_stream_response(size: int, chunks: Iterable[bytes]) -> HttpResponse:
    """Return a 200 response streaming exactly ``size`` bytes from ``chunks``."""
    headers = [
        ("Content-Type", "application/octet-stream"),
        ("Content-Length", str(size)),
    ]
    return HttpResponse(HTTPStatus.OK, headers, b"", body_iter=chunks)


def created_response() -> HttpResponse:
    """Return a 201 Created response with no headers and no body."""
    return HttpResponse(HTTPStatus.CREATED)


def not_found_response() -> HttpResponse:
    """Return a 404 Not Found response with no headers and no body."""
    return HttpResponse(HTTPStatus.NOT_FOUND)


def bad_request_response() -> HttpResponse:
    """Return a 400 Bad Request response for unparseable requests."""
    return HttpResponse(HTTPStatus.BAD_REQUEST)


def internal_error_response() -> HttpResponse:
    """Return a 500 response for failed file writes."""
    return HttpResponse(HTTPStatus.INTERNAL_SERVER_ERROR)
