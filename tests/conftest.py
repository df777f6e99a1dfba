"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Generator, TypedDict

import pytest

from tests.utils.http import reserve_port, wait_for_port

if TYPE_CHECKING:
    from _pytest.tmpdir import TempPathFactory

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SERVER_ENTRYPOINT = PROJECT_ROOT / "main.py"
HOST = "127.0.0.1"


class ServerProcessInfo(TypedDict):
    """Metadata describing a running server fixture instance."""

    base_url: str
    host: str
    port: int
    directory: Path | None
    process: subprocess.Popen[bytes]
    log_file: Path


def _launch_server(
    log_dir: Path,
    directory: Path | None = None,
    extra_args: list[str] | None = None,
) -> Generator[ServerProcessInfo, None, None]:
    port = reserve_port(HOST)
    log_file = log_dir / "server.log"
    args = [
        sys.executable,
        str(SERVER_ENTRYPOINT),
        "--host",
        HOST,
        "--port",
        str(port),
        "--log-level",
        "DEBUG",
        "--log-destination",
        str(log_file),
    ]
    if directory is not None:
        args.extend(["--directory", str(directory)])
    if extra_args:
        args.extend(extra_args)

    with subprocess.Popen(
        args,
        cwd=PROJECT_ROOT,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    ) as process:
        try:
            wait_for_port(HOST, port)
        except Exception:
            process.terminate()
            stdout, stderr = process.communicate(timeout=5)
            print(f"\nServer stdout:\n{stdout.decode()}")
            print(f"\nServer stderr:\n{stderr.decode()}")
            raise

        yield {
            "base_url": f"http://{HOST}:{port}",
            "host": HOST,
            "port": port,
            "directory": directory,
            "process": process,
            "log_file": log_file,
        }

        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                process.kill()


@pytest.fixture(name="server_process")
def _server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the server with a files directory and delimited framing."""

    directory = tmp_path_factory.mktemp("server-files")
    log_dir = tmp_path_factory.mktemp("server-logs")
    yield from _launch_server(log_dir, directory)


@pytest.fixture(name="bare_server_process")
def _bare_server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the server without a files directory."""

    log_dir = tmp_path_factory.mktemp("server-logs-bare")
    yield from _launch_server(log_dir)


@pytest.fixture(name="short_read_server_process")
def _short_read_server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the server using the short-read framing heuristic."""

    directory = tmp_path_factory.mktemp("server-files-short")
    log_dir = tmp_path_factory.mktemp("server-logs-short")
    yield from _launch_server(log_dir, directory, ["--framing", "short-read"])


@pytest.fixture()
def base_url(server_process: ServerProcessInfo) -> str:
    """Expose the running server base URL to integration tests."""

    return server_process["base_url"]
