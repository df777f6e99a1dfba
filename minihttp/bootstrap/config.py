"""Server configuration and CLI argument parsing."""

import argparse
import enum
import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    return value if value else default


class FramingMode(str, enum.Enum):
    """How the frame reader decides that a request has been fully received."""

    DELIMITED = "delimited"
    SHORT_READ = "short-read"


DEFAULT_HOST = _env_str("MINIHTTP_HOST", "127.0.0.1")
DEFAULT_PORT = _env_int("MINIHTTP_PORT", 4221)
DEFAULT_DIRECTORY = _env_str("MINIHTTP_DIRECTORY", None)
DEFAULT_FRAMING = _env_str("MINIHTTP_FRAMING", FramingMode.DELIMITED.value)

READ_BUFFER_SIZE = 1024
ACCEPT_POLL_SECONDS = 0.5

# A blank line ends the headers whether lines end in CRLF or bare LF.
HEADER_TERMINATORS = (b"\n\n", b"\n\r\n")
ECHO_PREFIX = "/echo/"
FILES_PREFIX = "/files/"
USER_AGENT_PATH = "/user-agent"
USER_AGENT_HEADER = "User-Agent"


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings shared read-only by every connection thread."""

    directory: Optional[str] = None
    framing: FramingMode = FramingMode.DELIMITED


def normalize_directory(directory: Optional[str]) -> Optional[str]:
    """Ensure a configured directory ends with the path separator."""
    if not directory:
        return None
    if directory.endswith(os.sep):
        return directory
    return directory + os.sep


def build_server_config(args: argparse.Namespace) -> ServerConfig:
    """Create the immutable server configuration from parsed CLI arguments."""
    return ServerConfig(
        directory=normalize_directory(args.directory),
        framing=FramingMode(args.framing),
    )


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(description="Minimal HTTP/1.1 file server")
    parser.add_argument(
        "--directory",
        default=DEFAULT_DIRECTORY,
        help="Base directory for /files/ routes (disabled when omitted)",
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--framing",
        default=DEFAULT_FRAMING,
        choices=[mode.value for mode in FramingMode],
        help="delimited: headers then Content-Length; short-read: stop on a short read",
    )
    default_log_level = os.getenv("MINIHTTP_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("MINIHTTP_LOG_DESTINATION", "stdout")
    default_log_format = os.getenv("MINIHTTP_LOG_FORMAT", "json").lower()
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=default_log_format,
        choices=["json", "text"],
        type=str.lower,
    )
    return parser.parse_args(argv)
