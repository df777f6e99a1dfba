"""Request routing logic."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from minihttp.bootstrap.config import (
    ECHO_PREFIX,
    FILES_PREFIX,
    USER_AGENT_PATH,
    ServerConfig,
)
from minihttp.domain.connection_id import get_logger
from minihttp.domain.http_types import HttpRequest, HttpResponse
from minihttp.domain.response_builders import not_found_response
from minihttp.handlers.file_handler import handle_files
from minihttp.handlers.system_handlers import (
    handle_echo,
    handle_root,
    handle_user_agent,
)

ROUTER_LOGGER = get_logger("pipeline.router")

Handler = Callable[[HttpRequest, ServerConfig], HttpResponse]


@dataclass(frozen=True)
class Route:
    """A named path matcher paired with the handler it selects."""

    name: str
    matches: Callable[[str], bool]
    handler: Handler


# Evaluated in order; the first match wins.
ROUTES: tuple[Route, ...] = (
    Route("/", lambda path: path == "/", handle_root),
    Route(USER_AGENT_PATH, lambda path: path == USER_AGENT_PATH, handle_user_agent),
    Route(ECHO_PREFIX + "*", lambda path: path.startswith(ECHO_PREFIX), handle_echo),
    Route(FILES_PREFIX + "*", lambda path: path.startswith(FILES_PREFIX), handle_files),
)


def select_route(path: str) -> Optional[Route]:
    """Return the first route matching the path, or None."""
    for route in ROUTES:
        if route.matches(path):
            return route
    return None


def route_request(request: HttpRequest, config: ServerConfig) -> HttpResponse:
    """Route the request to the matching handler and return its response."""
    route = select_route(request.path)
    if route is None:
        ROUTER_LOGGER.info(
            "No matching route found",
            extra={
                "event": "route_not_found",
                "path": request.path,
                "method": request.method.value,
            },
        )
        return not_found_response()

    if ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ROUTER_LOGGER.debug(
            "Route matched",
            extra={
                "event": "route_matched",
                "route": route.name,
                "method": request.method.value,
            },
        )
    return route.handler(request, config)
