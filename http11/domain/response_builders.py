"""Pure HTTP response builders and wire serialization."""

from typing import Optional

from http11.bootstrap.config import ALLOWED_METHODS, CRLF
from http11.domain.http_types import HttpResponse

DEFAULT_PROTOCOL = "HTTP/1.1"

REASON_PHRASES = {
    200: "OK",
    302: "Found",
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    413: "Payload Too Large",
    500: "Internal Server Error",
}

HTML = "text/html;charset=utf-8"
CSS = "text/css;charset=utf-8"
JAVASCRIPT = "text/javascript;charset=utf-8"
PLAIN = "text/plain;charset=utf-8"


def serialize_response(response: HttpResponse) -> bytes:
    """Encode the response as status line, headers, blank line and body.

    Content-Length always reflects the body; a caller-supplied value is dropped.
    """
    headers = {
        name: value
        for name, value in response.headers.items()
        if name.lower() not in ("content-length", "connection")
    }
    headers["Content-Length"] = str(len(response.body))
    headers["Connection"] = "close"
    lines = [response.status_line]
    lines.extend(f"{name}: {value}" for name, value in headers.items())
    head = CRLF.join(lines) + CRLF + CRLF
    return head.encode("latin-1") + response.body


def build_response(
    status_code: int,
    body: bytes = b"",
    content_type: Optional[str] = None,
    protocol: str = DEFAULT_PROTOCOL,
    headers: Optional[dict[str, str]] = None,
) -> HttpResponse:
    """Create a response with the standard reason phrase for the status."""
    response_headers: dict[str, str] = {}
    if content_type is not None:
        response_headers["Content-Type"] = content_type
    response_headers.update(headers or {})
    return HttpResponse(
        status_code,
        REASON_PHRASES.get(status_code, "Unknown"),
        response_headers,
        body,
        protocol,
    )


def text_response(
    message: str, content_type: str = HTML, protocol: str = DEFAULT_PROTOCOL
) -> HttpResponse:
    """Return a 200 response carrying an inline text body."""
    return build_response(200, message.encode(), content_type, protocol)


def resource_response(
    payload: bytes, content_type: str, protocol: str = DEFAULT_PROTOCOL
) -> HttpResponse:
    """Return a 200 response carrying a static resource."""
    return build_response(200, payload, content_type, protocol)


def redirect_response(
    location: str,
    protocol: str = DEFAULT_PROTOCOL,
    set_cookie: Optional[str] = None,
) -> HttpResponse:
    """Return a 302 pointing at ``location``, optionally setting a cookie."""
    headers = {"Location": location}
    if set_cookie is not None:
        headers["Set-Cookie"] = set_cookie
    return build_response(302, protocol=protocol, headers=headers)


def not_found_response(
    protocol: str = DEFAULT_PROTOCOL, page: Optional[bytes] = None
) -> HttpResponse:
    """Return a 404, with the not-found page when one is available."""
    if page is None:
        return build_response(404, b"Not Found", PLAIN, protocol)
    return build_response(404, page, HTML, protocol)


def bad_request_response(protocol: str = DEFAULT_PROTOCOL) -> HttpResponse:
    """Produce a 400 response for malformed requests."""
    return build_response(400, b"Bad Request", PLAIN, protocol)


def conflict_response(message: str, protocol: str = DEFAULT_PROTOCOL) -> HttpResponse:
    """Produce a 409 response explaining the conflicting state."""
    return build_response(409, message.encode(), PLAIN, protocol)


def method_not_allowed_response(protocol: str = DEFAULT_PROTOCOL) -> HttpResponse:
    """Produce a 405 response enumerating the supported HTTP methods."""
    allow_header = ", ".join(sorted(ALLOWED_METHODS))
    return build_response(405, protocol=protocol, headers={"Allow": allow_header})


def entity_too_large_response() -> HttpResponse:
    """Produce a 413 response for bodies over the configured limit."""
    return build_response(413, b"Payload Too Large", PLAIN)


def internal_error_response() -> HttpResponse:
    return build_response(500, b"Internal Server Error", PLAIN)
