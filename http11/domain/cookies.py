"""Cookie header parsing and session cookie serialization."""

from typing import Iterator, Mapping, Optional

from http11.bootstrap.config import SESSION_COOKIE_NAME


class HttpCookie(Mapping[str, str]):
    """Cookies sent by the client in a single ``Cookie`` header.

    Pairs are separated by ``;``; each pair is split on the first ``=``.
    Pairs without ``=`` or with an empty name are skipped. Names are
    case-sensitive and the last duplicate wins.
    """

    def __init__(self, cookies: Optional[dict[str, str]] = None) -> None:
        self._cookies = dict(cookies or {})

    @classmethod
    def parse(cls, header: Optional[str]) -> "HttpCookie":
        cookies: dict[str, str] = {}
        if not header:
            return cls(cookies)
        for pair in header.split(";"):
            name, sep, value = pair.strip().partition("=")
            if not sep or not name.strip():
                continue
            cookies[name.strip()] = value.strip()
        return cls(cookies)

    @property
    def session_id(self) -> Optional[str]:
        """Value of the session cookie, or None when the client sent none."""
        return self._cookies.get(SESSION_COOKIE_NAME) or None

    def __getitem__(self, name: str) -> str:
        return self._cookies[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cookies)

    def __len__(self) -> int:
        return len(self._cookies)

    def __repr__(self) -> str:
        return f"HttpCookie({self._cookies!r})"


def set_cookie_value(value: str, name: str = SESSION_COOKIE_NAME) -> str:
    """Return the ``Set-Cookie`` header value for a cookie."""
    return f"{name}={value}"
