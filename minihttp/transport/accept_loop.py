"""Main connection acceptance loop."""

import logging
import socket
import threading

from minihttp.bootstrap.config import ServerConfig
from minihttp.bootstrap.socket_factory import create_server_socket
from minihttp.domain.connection_id import get_logger
from minihttp.lifecycle.state import ServerLifecycle
from minihttp.transport.worker import handle_client

ACCEPT_LOGGER = get_logger("transport.accept")


def _spawn_worker(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    config: ServerConfig,
) -> threading.Thread:
    """Hand the accepted socket to its own daemon thread."""
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={
                "event": "client_accepted",
                "client": f"{client_address[0]}:{client_address[1]}",
            },
        )
    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, config),
        daemon=True,
    )
    thread.start()
    return thread


def accept_connections(
    server_socket: socket.socket, config: ServerConfig, lifecycle: ServerLifecycle
) -> None:
    """Accept until the lifecycle signals stop; the stop signal wins any tie."""
    try:
        while not lifecycle.should_stop():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={
                        "event": "accept_error",
                        "error_type": type(error).__name__,
                        "error": str(error),
                    },
                )
                continue

            if lifecycle.should_stop():
                client_socket.close()
                break

            _spawn_worker(client_socket, client_address, config)
    finally:
        server_socket.close()
        ACCEPT_LOGGER.info("Server stopped", extra={"event": "server_stopped"})


def run_server(
    host: str, port: int, config: ServerConfig, lifecycle: ServerLifecycle
) -> None:
    """Create the listening socket and serve until the lifecycle signals stop."""
    server_socket = create_server_socket(host, port)
    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={
            "event": "server_listening",
            "host": host,
            "port": port,
            "directory": config.directory,
            "framing": config.framing.value,
        },
    )
    accept_connections(server_socket, config, lifecycle)
