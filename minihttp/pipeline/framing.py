"""Frame reader: pulls one request's bytes off a connected socket."""

import logging
import socket
from typing import Optional

from minihttp.bootstrap.config import (
    HEADER_TERMINATORS,
    READ_BUFFER_SIZE,
    FramingMode,
)
from minihttp.domain.connection_id import get_logger
from minihttp.domain.errors import InvalidContentLength, ReadError

FRAMING_LOGGER = get_logger("pipeline.framing")


def _recv(client_socket: socket.socket, buffer_size: int) -> bytes:
    try:
        return client_socket.recv(buffer_size)
    except OSError as error:
        raise ReadError(f"Socket read failed: {error}") from error


def read_until_short(
    client_socket: socket.socket, buffer_size: int = READ_BUFFER_SIZE
) -> bytes:
    """Accumulate reads until one returns fewer bytes than the buffer size.

    This stops early when a client's request arrives in several small
    segments, and keeps blocking while every read happens to fill the buffer.
    """
    data = bytearray()
    while True:
        chunk = _recv(client_socket, buffer_size)
        if not chunk:
            break
        data += chunk
        if len(chunk) < buffer_size:
            break
    return bytes(data)


def declared_content_length(header_block: bytes) -> int:
    """Return the Content-Length announced in a raw header block, or 0."""
    for line in header_block.split(b"\n")[1:]:
        name, separator, value = line.partition(b":")
        if not separator or name.strip().lower() != b"content-length":
            continue
        raw_value = value.strip()
        if not raw_value.isdigit():
            raise InvalidContentLength(f"Invalid Content-Length: {raw_value!r}")
        return int(raw_value)
    return 0


def find_header_end(data: bytes) -> Optional[tuple[int, int]]:
    """Locate the blank line ending the headers, with or without CRs.

    Returns the offsets where the terminator starts and ends, or None when
    no blank line has arrived yet.
    """
    found = [
        (index, index + len(terminator))
        for terminator in HEADER_TERMINATORS
        if (index := data.find(terminator)) != -1
    ]
    return min(found) if found else None


def read_delimited(
    client_socket: socket.socket, buffer_size: int = READ_BUFFER_SIZE
) -> bytes:
    """Read the header block up to the blank line, then exactly Content-Length bytes."""
    data = b""
    while (header_end := find_header_end(data)) is None:
        chunk = _recv(client_socket, buffer_size)
        if not chunk:
            return data
        data += chunk

    start, end = header_end
    content_length = declared_content_length(data[:start])
    body = data[end:]

    while len(body) < content_length:
        chunk = _recv(client_socket, buffer_size)
        if not chunk:
            break
        body += chunk

    return data[:end] + body[:content_length]


def read_frame(
    client_socket: socket.socket,
    framing: FramingMode = FramingMode.DELIMITED,
    buffer_size: int = READ_BUFFER_SIZE,
) -> str:
    """Read one request from the socket and decode it as UTF-8 text."""
    if framing is FramingMode.SHORT_READ:
        raw = read_until_short(client_socket, buffer_size)
    else:
        raw = read_delimited(client_socket, buffer_size)

    if FRAMING_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FRAMING_LOGGER.debug(
            "Request bytes received",
            extra={
                "event": "frame_read",
                "framing": framing.value,
                "bytes_in": len(raw),
            },
        )

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as error:
        raise ReadError("Request is not valid UTF-8") from error
