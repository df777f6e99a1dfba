"""Response writer: serializes an HttpResponse onto the socket."""

import socket

from minihttp.domain.connection_id import get_logger
from minihttp.domain.http_types import HttpResponse

WRITER_LOGGER = get_logger("pipeline.writer")


def serialize_head(response: HttpResponse) -> bytes:
    """Return the status line and ordered headers, ending with a blank line."""
    lines = [response.status_line]
    lines.extend(f"{name}: {value}" for name, value in response.headers)
    return ("\r\n".join(lines) + "\r\n\r\n").encode()


def send_response(client_socket: socket.socket, response: HttpResponse) -> int:
    """Write the response and return the number of bytes sent.

    Socket errors propagate to the caller; nothing is retried.
    """
    head = serialize_head(response)
    if response.body_iter is None:
        client_socket.sendall(head + response.body)
        sent = len(head) + len(response.body)
    else:
        sent = 0
        try:
            client_socket.sendall(head)
            sent = len(head)
            for chunk in response.body_iter:
                client_socket.sendall(chunk)
                sent += len(chunk)
        finally:
            close = getattr(response.body_iter, "close", None)
            if close is not None:
                close()

    WRITER_LOGGER.debug(
        "Sent response",
        extra={
            "event": "response_sent",
            "status_code": response.status.value,
            "bytes_out": sent,
        },
    )
    return sent
