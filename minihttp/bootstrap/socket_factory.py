"""Listening socket creation."""

import socket

from minihttp.bootstrap.config import ACCEPT_POLL_SECONDS


def create_server_socket(host: str, port: int) -> socket.socket:
    """Bind the listening socket with a short accept timeout for shutdown polling."""
    server_socket = socket.create_server(
        (host, port), reuse_port=hasattr(socket, "SO_REUSEPORT")
    )
    server_socket.settimeout(ACCEPT_POLL_SECONDS)
    return server_socket
