"""File transfer handlers scoped to the configured base directory.

The requested name is appended to the base directory verbatim. Names holding
``..`` segments or nested separators are not confined to the directory.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Iterator

from minihttp.bootstrap.config import FILES_PREFIX, ServerConfig
from minihttp.domain.connection_id import get_logger
from minihttp.domain.http_types import HttpRequest, HttpResponse, Method
from minihttp.domain.response_builders import (
    created_response,
    internal_error_response,
    not_found_response,
    octet_stream_response,
)

FILE_LOGGER = get_logger("handlers.file")

STREAM_CHUNK_SIZE = 65536
SAVE_METHODS = frozenset({Method.POST, Method.PUT})


def stream_file(
    file_handle: BinaryIO, size: int, chunk_size: int = STREAM_CHUNK_SIZE
) -> Iterator[bytes]:
    """Yield exactly ``size`` bytes from an open file in fixed-size chunks.

    The handle is closed once the generator finishes or is closed. Raises
    OSError when the file ends before ``size`` bytes were read, since the
    Content-Length already on the wire can no longer be honoured.
    """
    remaining = size
    with file_handle:
        while remaining > 0:
            chunk = file_handle.read(min(chunk_size, remaining))
            if not chunk:
                raise OSError(
                    f"{file_handle.name} shrank while streaming: "
                    f"{remaining} bytes missing"
                )
            remaining -= len(chunk)
            yield chunk


def resolve_target(directory: str, request_path: str) -> Path:
    """Join the base directory and the name after /files/ without normalization."""
    return Path(directory + request_path[len(FILES_PREFIX) :])


def serve_file(target: Path) -> HttpResponse:
    """Stream a regular file back as application/octet-stream, or 404."""
    if not target.is_file():
        FILE_LOGGER.info(
            "File not found",
            extra={"event": "file_not_found", "path": target.as_posix()},
        )
        return not_found_response()

    # Opened before the head is written; open failures end the connection unanswered.
    size = target.stat().st_size
    file_handle = open(target, "rb")
    FILE_LOGGER.info(
        "Serving file",
        extra={"event": "file_served", "path": target.as_posix(), "bytes_out": size},
    )
    return octet_stream_response(size, stream_file(file_handle, size))


def save_file(target: Path, body: str) -> HttpResponse:
    """Replace the file's content with the request body: 201, or 500 on failure."""
    payload = body.encode()
    if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "File write started",
            extra={
                "event": "file_write_started",
                "path": target.as_posix(),
                "bytes_in": len(payload),
            },
        )
    try:
        with open(target, "wb") as file_handle:
            file_handle.write(payload)
    except (OSError, ValueError) as error:
        # ValueError: names with an embedded NUL byte cannot be opened.
        FILE_LOGGER.error(
            "File write failed",
            extra={
                "event": "file_store_failed",
                "path": target.as_posix(),
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )
        return internal_error_response()

    FILE_LOGGER.info(
        "File stored",
        extra={
            "event": "file_stored",
            "path": target.as_posix(),
            "bytes_in": len(payload),
        },
    )
    return created_response()


def handle_files(request: HttpRequest, config: ServerConfig) -> HttpResponse:
    """Dispatch /files/ requests by method when a base directory is configured."""
    if config.directory is None:
        FILE_LOGGER.info(
            "File routes disabled",
            extra={"event": "files_disabled", "path": request.path},
        )
        return not_found_response()

    target = resolve_target(config.directory, request.path)
    if request.method is Method.GET:
        return serve_file(target)
    if request.method in SAVE_METHODS:
        return save_file(target, request.body)

    FILE_LOGGER.info(
        "Unsupported method for file route",
        extra={"event": "route_not_found", "method": request.method.value},
    )
    return not_found_response()
