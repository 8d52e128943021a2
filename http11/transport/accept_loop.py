"""Main connection acceptance loop."""

import socket
import threading

from http11.bootstrap.socket_factory import create_server_socket
from http11.domain.request_context import get_logger
from http11.transport.context import WorkerContext
from http11.transport.worker import handle_client

ACCEPT_LOGGER = get_logger("transport.accept")


def _spawn_worker(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> threading.Thread:
    """Hand the accepted connection to its own worker thread."""
    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, context),
        name=f"http11-worker-{client_address[0]}:{client_address[1]}",
        daemon=False,
    )
    if context.lifecycle is not None:
        context.lifecycle.register_worker(thread)
    thread.start()
    return thread


def run_server(context: WorkerContext) -> None:
    """Accept connections until the lifecycle asks to stop, then drain workers."""
    config = context.config
    lifecycle = context.lifecycle
    server_socket = create_server_socket(config.host, config.port)

    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={"event": "server_listening", "host": config.host, "port": config.port},
    )

    try:
        while lifecycle is None or not lifecycle.should_stop():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle is not None and lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={"event": "accept_error", "error_type": type(error).__name__},
                )
                continue

            _spawn_worker(client_socket, client_address, context)
    finally:
        server_socket.close()
        if lifecycle is not None:
            ACCEPT_LOGGER.info(
                "Waiting for active connections to complete",
                extra={
                    "event": "shutdown_waiting",
                    "shutdown_grace_seconds": config.shutdown_grace_seconds,
                },
            )
            lifecycle.wait_for_workers(config.shutdown_grace_seconds)
        ACCEPT_LOGGER.info(
            "Server shutdown complete", extra={"event": "server_stopped"}
        )
