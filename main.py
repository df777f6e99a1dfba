"""HTTP server supporting echo, user-agent, and file transfer routes."""

import signal
import sys

from minihttp.bootstrap.config import build_server_config, parse_cli_args
from minihttp.bootstrap.logging_setup import configure_logging
from minihttp.domain.connection_id import get_logger
from minihttp.lifecycle.state import ServerLifecycle
from minihttp.transport.accept_loop import run_server

SERVER_LOGGER = get_logger("server")


def main(argv: list[str] | None = None) -> None:
    """Start the HTTP server and spawn a worker thread per connection."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    configure_logging(
        args.log_level, args.log_destination, use_json=args.log_format == "json"
    )

    config = build_server_config(args)
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        lifecycle.request_stop(signal.Signals(signum).name)

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting HTTP server",
        extra={
            "host": args.host,
            "port": args.port,
            "directory": config.directory,
            "framing": config.framing.value,
            "log_destination": args.log_destination,
            "log_level": args.log_level,
        },
    )
    run_server(args.host, args.port, config, lifecycle)


if __name__ == "__main__":
    main()
