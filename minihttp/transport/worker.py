"""Worker thread logic for handling one client connection end to end."""

import enum
import logging
import socket
from typing import Optional

from minihttp.bootstrap.config import ServerConfig
from minihttp.domain.connection_id import (
    clear_connection_id,
    generate_connection_id,
    get_logger,
    set_connection_id,
)
from minihttp.domain.errors import ReadError, RequestParseError
from minihttp.domain.http_types import HttpRequest
from minihttp.domain.response_builders import bad_request_response
from minihttp.pipeline.framing import read_frame
from minihttp.pipeline.parser import parse_request
from minihttp.pipeline.router import route_request
from minihttp.pipeline.writer import send_response

WORKER_LOGGER = get_logger("transport.worker")


class ConnectionState(enum.Enum):
    ACCEPTED = "accepted"
    READING = "reading"
    PARSED = "parsed"
    ROUTED = "routed"
    RESPONDING = "responding"
    CLOSED = "closed"


class Connection:
    """Tracks one accepted socket through its single request/response cycle."""

    def __init__(
        self, client_socket: socket.socket, client_address: tuple[str, int]
    ) -> None:
        self.socket = client_socket
        self.client = f"{client_address[0]}:{client_address[1]}"
        self.state = ConnectionState.ACCEPTED
        self.history = [ConnectionState.ACCEPTED]

    def transition(self, state: ConnectionState) -> None:
        self.state = state
        self.history.append(state)
        if WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            WORKER_LOGGER.debug(
                "Connection state changed",
                extra={
                    "event": "state_transition",
                    "client": self.client,
                    "state": state.value,
                },
            )

    def close(self) -> None:
        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass
        self.socket.close()
        self.transition(ConnectionState.CLOSED)


def _read_request(
    connection: Connection, config: ServerConfig
) -> Optional[HttpRequest]:
    """Read and parse the request, answering 400 when it cannot be parsed."""
    connection.transition(ConnectionState.READING)
    try:
        text = read_frame(connection.socket, config.framing)
        if not text:
            WORKER_LOGGER.debug(
                "Client disconnected before sending a request",
                extra={"event": "client_disconnected", "client": connection.client},
            )
            return None
        request = parse_request(text)
    except RequestParseError as error:
        WORKER_LOGGER.warning(
            "Malformed request received",
            extra={
                "event": "malformed_request",
                "client": connection.client,
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )
        connection.transition(ConnectionState.RESPONDING)
        send_response(connection.socket, bad_request_response())
        return None

    connection.transition(ConnectionState.PARSED)
    return request


def serve_connection(connection: Connection, config: ServerConfig) -> None:
    """Run read, parse, route and respond for a single request."""
    request = _read_request(connection, config)
    if request is None:
        return

    response = route_request(request, config)
    connection.transition(ConnectionState.ROUTED)

    connection.transition(ConnectionState.RESPONDING)
    bytes_out = send_response(connection.socket, response)
    WORKER_LOGGER.info(
        "Request complete",
        extra={
            "event": "request_complete",
            "client": connection.client,
            "method": request.method.value,
            "path": request.path,
            "status_code": response.status.value,
            "bytes_out": bytes_out,
        },
    )


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    config: ServerConfig,
) -> None:
    """Own a client socket end to end; failures stay confined to this connection."""
    set_connection_id(generate_connection_id())
    connection = Connection(client_socket, client_address)

    try:
        serve_connection(connection, config)
    except (ReadError, OSError) as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "client": connection.client,
                "state": connection.state.value,
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": connection.client,
                "state": connection.state.value,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        connection.close()
        clear_connection_id()
