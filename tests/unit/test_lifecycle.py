"""Unit tests for server lifecycle tracking and the accept loop."""

import logging
import threading
from unittest.mock import MagicMock, patch

from http11.bootstrap.config import ServerConfig
from http11.handlers.static_resources import MemoryResources
from http11.lifecycle.state import ServerLifecycle
from http11.transport.accept_loop import run_server
from http11.transport.context import WorkerContext


def test_request_stop_flips_flag():
    """The accept loop observes stop requests."""
    lifecycle = ServerLifecycle()

    assert not lifecycle.should_stop()
    lifecycle.request_stop()
    assert lifecycle.should_stop()


def test_wait_for_workers_joins_finished_threads():
    """Completed workers let shutdown finish early."""
    lifecycle = ServerLifecycle()
    release = threading.Event()
    worker = threading.Thread(target=release.wait)
    lifecycle.register_worker(worker)
    worker.start()

    assert lifecycle.active_worker_count() == 1
    release.set()
    assert lifecycle.wait_for_workers(timeout=2)
    assert lifecycle.active_worker_count() == 0


def test_wait_for_workers_times_out(caplog):
    """Stuck workers are reported once the grace period ends."""
    caplog.set_level(logging.WARNING, logger="http11")
    lifecycle = ServerLifecycle()
    release = threading.Event()
    worker = threading.Thread(target=release.wait)
    lifecycle.register_worker(worker)
    worker.start()

    try:
        assert not lifecycle.wait_for_workers(timeout=0.05)
    finally:
        release.set()
        worker.join()
    assert any(
        getattr(record, "event", None) == "shutdown_timeout"
        for record in caplog.records
    )


def test_run_server_spawns_worker_per_connection(caplog):
    """Each accepted socket is handed to handle_client on its own thread."""
    caplog.set_level(logging.INFO, logger="http11")
    lifecycle = ServerLifecycle()
    context = WorkerContext(
        resources=MemoryResources({}),
        config=ServerConfig(host="127.0.0.1", port=0, shutdown_grace_seconds=1),
        lifecycle=lifecycle,
    )
    client_socket = MagicMock()
    server_socket = MagicMock()

    def accept():
        if server_socket.accept.call_count > 1:
            lifecycle.request_stop()
            raise OSError("closed")
        return client_socket, ("127.0.0.1", 40000)

    server_socket.accept.side_effect = accept
    registered = []

    with patch(
        "http11.transport.accept_loop.create_server_socket",
        return_value=server_socket,
    ), patch("http11.transport.accept_loop.handle_client") as handle_client:
        handle_client.side_effect = lambda *_: registered.append(
            lifecycle.active_worker_count()
        )
        run_server(context)

    handle_client.assert_called_once_with(
        client_socket, ("127.0.0.1", 40000), context
    )
    server_socket.close.assert_called_once()
    assert registered == [1]
    events = [getattr(record, "event", None) for record in caplog.records]
    assert "server_listening" in events
    assert "server_stopped" in events
