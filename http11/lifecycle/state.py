"""Server lifecycle state management."""

import threading
import time

from http11.domain.request_context import get_logger

LIFECYCLE_LOGGER = get_logger("lifecycle")


class ServerLifecycle:
    """Tracks the stop flag and the connection threads still running."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stopping = threading.Event()
        self._workers: set[threading.Thread] = set()

    def should_stop(self) -> bool:
        """Check if the accept loop should stop taking connections."""
        return self._stopping.is_set()

    def request_stop(self) -> None:
        """Ask the accept loop to stop; in-flight connections keep running."""
        if not self._stopping.is_set():
            LIFECYCLE_LOGGER.info("Stop requested", extra={"event": "stop_requested"})
        self._stopping.set()

    def register_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.add(thread)

    def cleanup_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.discard(thread)

    def active_worker_count(self) -> int:
        with self._lock:
            return sum(1 for worker in self._workers if worker.is_alive())

    def wait_for_workers(self, timeout: float) -> bool:
        """Join connection threads until they finish or ``timeout`` elapses."""
        deadline = time.monotonic() + timeout
        with self._lock:
            pending = [worker for worker in self._workers if worker.is_alive()]
        for worker in pending:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            worker.join(timeout=remaining)

        still_running = self.active_worker_count()
        if still_running:
            LIFECYCLE_LOGGER.warning(
                "Shutdown timeout exceeded",
                extra={"event": "shutdown_timeout", "remaining_workers": still_running},
            )
            return False
        return True
