"""HTTP/1.1 server with static pages, registration, login and cookie sessions."""

import signal
import sys

from http11.bootstrap.config import (
    SEED_ACCOUNT,
    ServerConfig,
    parse_cli_args,
)
from http11.bootstrap.logging_setup import configure_logging
from http11.domain.request_context import get_logger
from http11.domain.session import SessionStore
from http11.domain.users import InMemoryUserRepository, User
from http11.handlers.static_resources import DirectoryResources
from http11.lifecycle.state import ServerLifecycle
from http11.transport.accept_loop import run_server
from http11.transport.context import WorkerContext

SERVER_LOGGER = get_logger("server")


def build_context(config: ServerConfig, seed_user: bool = True) -> WorkerContext:
    """Wire the shared stores and the static resource provider."""
    users = InMemoryUserRepository()
    if seed_user:
        users.save(User(*SEED_ACCOUNT))
    return WorkerContext(
        resources=DirectoryResources(config.static_dir),
        sessions=SessionStore(),
        users=users,
        config=config,
        lifecycle=ServerLifecycle(),
    )


def main(argv: list[str] | None = None) -> None:
    """Start the HTTP server and spawn a worker thread per connection."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level, args.log_destination, args.log_json)

    config = ServerConfig.from_args(args)
    context = build_context(config, args.seed_user)
    lifecycle = context.lifecycle

    def shutdown_handler(signum: int, _frame) -> None:
        SERVER_LOGGER.info("Received shutdown signal", extra={"signal": signum})
        lifecycle.request_stop()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting HTTP server",
        extra={
            "event": "server_starting",
            "host": config.host,
            "port": config.port,
            "static_dir": config.static_dir,
            "log_destination": args.log_destination,
            "log_level": args.log_level,
            "socket_timeout": config.socket_timeout,
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
        },
    )
    run_server(context)


if __name__ == "__main__":
    main()
