"""HTTP Input/Output operations."""

import re
from types import MappingProxyType
from typing import BinaryIO, Mapping

from http11.bootstrap.config import (
    DEFAULT_MAX_BODY_BYTES,
    MAX_HEADERS,
    MAX_LINE_BYTES,
)
from http11.domain.http_types import (
    Headers,
    HttpMethod,
    HttpRequest,
    HttpResponse,
    RequestLine,
    parse_form,
)
from http11.domain.request_context import get_logger
from http11.domain.response_builders import serialize_response

IO_LOGGER = get_logger("pipeline.io")

PROTOCOL_PATTERN = re.compile(r"^HTTP/\d\.\d$")


class ParseError(Exception):
    """Raised when the byte stream does not hold a well-formed request."""


class ConnectionClosed(ParseError):
    """Raised when the client closed the connection without sending a request."""


class MethodNotAllowed(ParseError):
    """Raised for request methods other than GET and POST."""


class RequestEntityTooLarge(ParseError):
    """Raised when a declared body exceeds the configured limit."""


def _read_line(stream: BinaryIO) -> bytes:
    """Read one CRLF-terminated line, returning it without the terminator."""
    line = stream.readline(MAX_LINE_BYTES + 1)
    if len(line) > MAX_LINE_BYTES:
        raise ParseError("Line too long")
    if not line.endswith(b"\n"):
        raise ParseError("Unexpected end of stream")
    return line.rstrip(b"\r\n")


def parse_request_line(raw_line: str) -> RequestLine:
    """Split ``METHOD SP TARGET SP VERSION`` into a RequestLine."""
    parts = raw_line.split(" ")
    if len(parts) != 3 or not all(parts):
        raise ParseError("Invalid request line")
    method, target, protocol = parts
    if not PROTOCOL_PATTERN.match(protocol):
        raise ParseError("Invalid protocol version")
    if not target.startswith("/"):
        raise ParseError("Invalid request target")
    try:
        http_method = HttpMethod(method)
    except ValueError as exc:
        raise MethodNotAllowed(method) from exc

    path, sep, query = target.partition("?")
    try:
        parse_form(query)
    except UnicodeDecodeError as exc:
        raise ParseError("Query string is not UTF-8") from exc
    return RequestLine(http_method, path, query if sep else None, protocol)


def parse_headers(lines: list[str]) -> Headers:
    """Convert raw header lines into a case-insensitive Headers mapping."""
    pairs = []
    for line in lines:
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise ParseError("Invalid header line")
        pairs.append((name.strip(), value.lstrip()))
    return Headers(pairs)


def determine_content_length(headers: Headers, max_body_bytes: int) -> int:
    """Validate and return the declared Content-Length for the request."""
    header_value = headers.get("Content-Length")
    if header_value is None:
        return 0
    value = header_value.strip()
    if not (value.isascii() and value.isdigit()):
        raise ParseError("Invalid Content-Length")
    content_length = int(value)
    if content_length > max_body_bytes:
        raise RequestEntityTooLarge(content_length)
    return content_length


def read_body(stream: BinaryIO, content_length: int) -> Mapping[str, str]:
    """Read exactly ``content_length`` bytes and decode them as a form."""
    payload = b""
    while len(payload) < content_length:
        chunk = stream.read(content_length - len(payload))
        if not chunk:
            raise ParseError("Truncated request body")
        payload += chunk
    try:
        form = parse_form(payload.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ParseError("Request body is not UTF-8") from exc
    return MappingProxyType(form)


def read_request(
    stream: BinaryIO, max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
) -> HttpRequest:
    """Read exactly one request from a binary stream."""
    first = stream.readline(MAX_LINE_BYTES + 1)
    if not first:
        raise ConnectionClosed
    if len(first) > MAX_LINE_BYTES or not first.endswith(b"\n"):
        raise ParseError("Incomplete request line")
    try:
        request_line = parse_request_line(first.rstrip(b"\r\n").decode("ascii"))
    except UnicodeDecodeError as exc:
        raise ParseError("Request line is not ASCII") from exc

    header_lines = []
    while True:
        line = _read_line(stream)
        if not line:
            break
        if len(header_lines) >= MAX_HEADERS:
            raise ParseError("Too many headers")
        header_lines.append(line.decode("latin-1"))
    headers = parse_headers(header_lines)

    body: Mapping[str, str] = MappingProxyType({})
    if request_line.is_post:
        content_length = determine_content_length(headers, max_body_bytes)
        body = read_body(stream, content_length)

    IO_LOGGER.debug(
        "Parsed request",
        extra={
            "event": "request_parsed",
            "method": request_line.method.value,
            "route": request_line.path,
            "protocol": request_line.protocol,
        },
    )
    return HttpRequest(request_line, headers, body)


def write_response(stream: BinaryIO, response: HttpResponse) -> int:
    """Serialize the response onto the stream and flush it."""
    payload = serialize_response(response)
    stream.write(payload)
    stream.flush()
    IO_LOGGER.debug(
        "Sent response",
        extra={
            "event": "response_sent",
            "status_code": response.status_code,
            "bytes_out": len(payload),
        },
    )
    return len(payload)
