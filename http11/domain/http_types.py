"""Shared HTTP type definitions to avoid circular imports."""

import urllib.parse
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Tuple


class HttpMethod(str, Enum):
    """Request methods the processor understands."""

    GET = "GET"
    POST = "POST"


class Headers(Mapping[str, str]):
    """Read-only header mapping with case-insensitive lookups.

    Insertion order is preserved. A repeated header replaces the earlier
    value but keeps the position and spelling of its first occurrence.
    """

    def __init__(self, pairs: Iterable[Tuple[str, str]] = ()) -> None:
        self._items: dict[str, Tuple[str, str]] = {}
        for name, value in pairs:
            key = name.lower()
            original = self._items[key][0] if key in self._items else name
            self._items[key] = (original, value)

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Headers({list(self._items.values())!r})"


@dataclass(frozen=True)
class RequestLine:
    """Method, target and protocol of a request, with routing predicates."""

    method: HttpMethod
    path: str
    query_string: Optional[str]
    protocol: str

    @property
    def is_get(self) -> bool:
        return self.method is HttpMethod.GET

    @property
    def is_post(self) -> bool:
        return self.method is HttpMethod.POST

    @property
    def is_root(self) -> bool:
        return self.path == "/"

    @property
    def is_index(self) -> bool:
        return self.path in ("/", "/index.html")

    @property
    def is_css(self) -> bool:
        return self.has_suffix(".css")

    @property
    def is_js(self) -> bool:
        return self.has_suffix(".js")

    @property
    def has_query(self) -> bool:
        return self.query_string is not None

    def has_suffix(self, suffix: str) -> bool:
        return self.path.endswith(suffix)

    def is_path(self, *routes: str) -> bool:
        return self.path in routes

    @property
    def query_params(self) -> Mapping[str, str]:
        """Decoded query parameters, last occurrence winning."""
        if not self.query_string:
            return MappingProxyType({})
        return MappingProxyType(parse_form(self.query_string))

    @property
    def target(self) -> str:
        if self.query_string is None:
            return self.path
        return f"{self.path}?{self.query_string}"


def parse_form(payload: str) -> dict[str, str]:
    """Decode an ``application/x-www-form-urlencoded`` payload.

    Raises UnicodeDecodeError when a percent-escape is not valid UTF-8.
    """
    return dict(
        urllib.parse.parse_qsl(payload, keep_blank_values=True, errors="strict")
    )


@dataclass(frozen=True)
class HttpRequest:
    """Represents a parsed HTTP request."""

    request_line: RequestLine
    headers: Headers = field(default_factory=Headers)
    body: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def method(self) -> HttpMethod:
        return self.request_line.method

    @property
    def path(self) -> str:
        return self.request_line.path

    @property
    def protocol(self) -> str:
        return self.request_line.protocol

    @property
    def cookie_header(self) -> Optional[str]:
        return self.headers.get("Cookie")


@dataclass
class HttpResponse:
    """Represents an HTTP response to be sent to a client."""

    status_code: int
    reason_phrase: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    protocol: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        return f"{self.protocol} {self.status_code} {self.reason_phrase}"
