"""Shutdown coordination between signal handlers and the accept loop."""

import threading
from typing import Optional

from minihttp.domain.connection_id import get_logger

LIFECYCLE_LOGGER = get_logger("lifecycle")


class ServerLifecycle:
    """Holds the single external cancellation signal the accept loop races against.

    Stopping only ends the accept loop; connection threads already running
    are neither awaited nor interrupted.
    """

    def __init__(self) -> None:
        self._stop_event = threading.Event()

    def should_stop(self) -> bool:
        """Check if the server should stop accepting new connections."""
        return self._stop_event.is_set()

    def request_stop(self, reason: Optional[str] = None) -> None:
        """Fire the cancellation signal; repeated calls are no-ops."""
        if self._stop_event.is_set():
            return
        self._stop_event.set()
        LIFECYCLE_LOGGER.info(
            "Shutdown requested",
            extra={"event": "shutdown_requested", "signal": reason or "-"},
        )

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stop is requested or the timeout elapses."""
        return self._stop_event.wait(timeout)
