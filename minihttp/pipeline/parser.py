"""Request parser: turns decoded request text into an HttpRequest."""

from typing import Iterable

from minihttp.domain.connection_id import get_logger
from minihttp.domain.errors import MalformedRequestLine, UnknownMethod
from minihttp.domain.http_types import HeaderValue, HttpRequest, Method

PARSER_LOGGER = get_logger("pipeline.parser")


def split_lines(text: str) -> list[str]:
    """Split on LF, dropping one trailing CR per line and a final empty segment."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_request_line(request_line: str) -> tuple[Method, str, str]:
    """Split the request line on its first and last space into method, path, version."""
    first_space = request_line.find(" ")
    last_space = request_line.rfind(" ")
    if first_space == -1 or first_space == last_space:
        raise MalformedRequestLine(f"Malformed request line: {request_line!r}")

    token = request_line[:first_space]
    method = Method.lookup(token)
    if method is None:
        raise UnknownMethod(token)

    path = request_line[first_space + 1 : last_space]
    version = request_line[last_space + 1 :]
    return method, path, version


def parse_headers(lines: Iterable[str]) -> dict[str, HeaderValue]:
    """Collect header lines, keeping every value of a repeated name in order.

    Lines without a colon are skipped. Names are kept exactly as sent.
    """
    headers: dict[str, HeaderValue] = {}
    for line in lines:
        name, separator, value = line.partition(":")
        if not separator:
            continue
        value = value.lstrip()
        existing = headers.get(name)
        if existing is None:
            headers[name] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            headers[name] = [existing, value]
    return headers


def parse_request(text: str) -> HttpRequest:
    """Parse a complete request into method, path, version, headers and body."""
    lines = split_lines(text)
    if not lines:
        raise MalformedRequestLine("Empty request")

    method, path, version = parse_request_line(lines[0])

    header_end = 1
    while header_end < len(lines) and lines[header_end] != "":
        header_end += 1
    headers = parse_headers(lines[1:header_end])
    body = "\n".join(lines[header_end + 1 :])

    PARSER_LOGGER.debug(
        "Parsed request",
        extra={"event": "request_parsed", "method": method.value, "path": path},
    )
    return HttpRequest(method, path, version, headers, body)
