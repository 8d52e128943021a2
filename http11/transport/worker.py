"""Worker thread logic for handling individual client connections."""

import socket
import threading
import time
from typing import BinaryIO, Optional

from http11.domain.http_types import HttpResponse
from http11.domain.request_context import (
    bind_request,
    get_logger,
    new_request_id,
    unbind_request,
)
from http11.domain.response_builders import (
    bad_request_response,
    entity_too_large_response,
    internal_error_response,
    method_not_allowed_response,
)
from http11.pipeline.io import (
    ConnectionClosed,
    MethodNotAllowed,
    ParseError,
    RequestEntityTooLarge,
    read_request,
    write_response,
)
from http11.pipeline.router import Router
from http11.transport.context import WorkerContext

WORKER_LOGGER = get_logger("transport.worker")

DEFAULT_ROUTER = Router()


def _read_failure_response(error: ParseError) -> Optional[HttpResponse]:
    """Map a request reading failure onto the response the client gets."""
    if isinstance(error, ConnectionClosed):
        WORKER_LOGGER.debug(
            "Client closed connection before sending a request",
            extra={"event": "client_disconnected"},
        )
        return None
    if isinstance(error, MethodNotAllowed):
        WORKER_LOGGER.warning(
            "Unsupported method",
            extra={"event": "method_not_allowed", "method": str(error)},
        )
        return method_not_allowed_response()
    if isinstance(error, RequestEntityTooLarge):
        WORKER_LOGGER.warning(
            "Request body size exceeded limit",
            extra={"event": "body_size_exceeded", "bytes_in": str(error)},
        )
        return entity_too_large_response()
    WORKER_LOGGER.warning(
        "Malformed request received",
        extra={"event": "malformed_request", "error": str(error)},
    )
    return bad_request_response()


def process_connection(
    rfile: BinaryIO,
    wfile: BinaryIO,
    context: WorkerContext,
    router: Router = DEFAULT_ROUTER,
) -> Optional[HttpResponse]:
    """Read one request, route it and write exactly one response.

    Returns the response written, or None when the client sent nothing.
    """
    started = time.monotonic()
    try:
        request = read_request(rfile, context.config.max_body_bytes)
    except ParseError as error:
        response = _read_failure_response(error)
        if response is not None:
            write_response(wfile, response)
        return response

    try:
        response = router.route_request(request, context)
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Route handler failed",
            extra={
                "event": "handler_error",
                "route": request.path,
                "error_type": type(error).__name__,
            },
            exc_info=True,
        )
        response = internal_error_response()
    response.protocol = request.protocol

    write_response(wfile, response)
    WORKER_LOGGER.info(
        "Request handled",
        extra={
            "event": "request_complete",
            "method": request.method.value,
            "route": request.path,
            "status_code": response.status_code,
            "duration_ms": round((time.monotonic() - started) * 1000, 3),
        },
    )
    return response


def _close_socket(client_socket: socket.socket) -> None:
    try:
        client_socket.shutdown(socket.SHUT_WR)
    except OSError:
        pass
    client_socket.close()


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
    router: Router = DEFAULT_ROUTER,
) -> None:
    """Serve a single request on the connection, then close it."""
    client_addr_str = f"{client_address[0]}:{client_address[1]}"
    current_thread = threading.current_thread()
    lifecycle = context.lifecycle
    bind_request(new_request_id(), client_addr_str)

    try:
        client_socket.settimeout(context.config.socket_timeout)
        with client_socket.makefile("rb") as rfile, client_socket.makefile(
            "wb"
        ) as wfile:
            process_connection(rfile, wfile, context, router)
    except (ConnectionError, TimeoutError, OSError) as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        _close_socket(client_socket)
        if lifecycle is not None:
            lifecycle.cleanup_worker(current_thread)
        WORKER_LOGGER.debug("Socket closed", extra={"event": "socket_closed"})
        unbind_request()
