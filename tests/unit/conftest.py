"""Shared fixtures for unit tests."""

import logging
import socket

import pytest


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure logs propagate to root so caplog can catch them."""
    logger = logging.getLogger("minihttp")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate


class FakeSocket:
    """Minimal socket stub returning predefined chunks and recording writes."""

    def __init__(self, chunks=(), fail_after=None):
        self._chunks = [
            chunk.encode() if isinstance(chunk, str) else chunk for chunk in chunks
        ]
        self.sent = b""
        self.recv_sizes = []
        self.closed = False
        self.shutdown_called = False
        self._sends_left = fail_after

    def recv(self, size):
        """Return the next chunk, or b"" once the script is exhausted."""
        self.recv_sizes.append(size)
        if not self._chunks:
            return b""
        chunk = self._chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk

    def push_error(self, error: Exception) -> None:
        """Make the next recv raise the given error."""
        self._chunks.insert(0, error)

    def sendall(self, data):
        """Record data, failing once ``fail_after`` writes have succeeded."""
        if self._sends_left is not None:
            if self._sends_left == 0:
                raise BrokenPipeError("peer went away")
            self._sends_left -= 1
        self.sent += data

    def shutdown(self, how):
        assert how == socket.SHUT_WR
        self.shutdown_called = True

    def close(self):
        self.closed = True


@pytest.fixture(name="fake_socket_factory")
def fixture_fake_socket_factory():
    """Return the FakeSocket class so tests can script socket behaviour."""
    return FakeSocket
