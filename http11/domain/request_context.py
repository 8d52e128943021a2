"""Per-request logging context backed by contextvars."""

import contextvars
import logging
import uuid
from typing import Any, MutableMapping, Optional

LOGGER_PREFIX = "http11."

_request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)
_client_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "client", default=None
)


def new_request_id() -> str:
    """Return a short random identifier for one request/response exchange."""
    return uuid.uuid4().hex[:12]


def bind_request(request_id: str, client: Optional[str] = None) -> None:
    """Attach the request id and peer address to the current thread's context."""
    _request_id_var.set(request_id)
    _client_var.set(client)


def current_request_id() -> Optional[str]:
    """Return the request id bound to the current context, if any."""
    return _request_id_var.get()


def current_client() -> Optional[str]:
    """Return the peer address bound to the current context, if any."""
    return _client_var.get()


def unbind_request() -> None:
    """Drop request details once the connection has been handled."""
    _request_id_var.set(None)
    _client_var.set(None)


class RequestLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter stamping records with the request id, peer and component."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})

        request_id = current_request_id()
        extra["request_id"] = request_id if request_id is not None else "-"
        client = current_client()
        if client is not None:
            extra.setdefault("client", client)

        name = self.logger.name
        extra["component"] = (
            name[len(LOGGER_PREFIX) :] if name.startswith(LOGGER_PREFIX) else name
        )
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str) -> RequestLoggerAdapter:
    """Return an adapter for the ``http11.<name>`` component logger."""
    return RequestLoggerAdapter(logging.getLogger(f"{LOGGER_PREFIX}{name}"), {})
