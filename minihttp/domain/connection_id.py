"""Per-connection identifiers carried through logging via contextvars."""

import contextvars
import logging
import uuid
from typing import Any, MutableMapping, Optional

LOGGER_PREFIX = "minihttp."

_connection_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "connection_id", default=None
)


def generate_connection_id() -> str:
    """Return a short random identifier for a newly accepted connection."""
    return uuid.uuid4().hex[:12]


def get_connection_id() -> Optional[str]:
    """Return the id of the connection handled by the current thread, if any."""
    return _connection_id_var.get()


def set_connection_id(connection_id: str) -> None:
    """Bind a connection id to the current context."""
    _connection_id_var.set(connection_id)


def clear_connection_id() -> None:
    """Forget the connection id once the connection is closed."""
    _connection_id_var.set(None)


class ConnectionLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps records with the connection id and component."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        """Add connection_id and component to the extra dict."""
        extra = dict(kwargs.get("extra") or {})

        connection_id = get_connection_id()
        extra["connection_id"] = connection_id if connection_id is not None else "-"

        name = self.logger.name
        extra["component"] = (
            name[len(LOGGER_PREFIX) :] if name.startswith(LOGGER_PREFIX) else name
        )

        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(component: str) -> ConnectionLoggerAdapter:
    """Return the adapter for a component logger under the project namespace."""
    return ConnectionLoggerAdapter(logging.getLogger(LOGGER_PREFIX + component), {})
