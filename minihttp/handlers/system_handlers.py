"""Handlers for the root, echo and user-agent routes."""

import logging

from minihttp.bootstrap.config import ECHO_PREFIX, USER_AGENT_HEADER, ServerConfig
from minihttp.domain.connection_id import get_logger
from minihttp.domain.http_types import HttpRequest, HttpResponse
from minihttp.domain.response_builders import (
    empty_response,
    not_found_response,
    text_response,
)

SYSTEM_LOGGER = get_logger("handlers.system")


def handle_root(_request: HttpRequest, _config: ServerConfig) -> HttpResponse:
    """Answer the root path with an empty 200."""
    return empty_response()


def handle_echo(request: HttpRequest, _config: ServerConfig) -> HttpResponse:
    """Return the path suffix after /echo/ verbatim."""
    content = request.path[len(ECHO_PREFIX) :]
    if SYSTEM_LOGGER.logger.isEnabledFor(logging.DEBUG):
        SYSTEM_LOGGER.debug(
            "Echo request processed",
            extra={"event": "echo_request", "bytes_out": len(content.encode())},
        )
    return text_response(content)


def handle_user_agent(request: HttpRequest, _config: ServerConfig) -> HttpResponse:
    """Mirror the User-Agent header, or 404 when the client sent none."""
    agent = request.header(USER_AGENT_HEADER)
    if agent is None:
        SYSTEM_LOGGER.info(
            "User-Agent header missing",
            extra={"event": "user_agent_missing", "path": request.path},
        )
        return not_found_response()
    return text_response(agent)
