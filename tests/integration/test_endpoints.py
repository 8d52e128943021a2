"""Integration tests exercising the public HTTP endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import requests

from tests.utils.http import parse_http_response, send_raw_request

pytestmark = pytest.mark.integration

if TYPE_CHECKING:
    from tests.conftest import ServerProcessInfo


def test_root_endpoint_says_hello(base_url: str) -> None:
    """Root answers with the fixed greeting and an exact length."""
    response = requests.get(f"{base_url}/", timeout=5)

    assert response.status_code == 200
    assert response.content == b"Hello world!"
    assert response.headers["Content-Length"] == "12"
    assert response.headers["Content-Type"] == "text/html;charset=utf-8"


@pytest.mark.parametrize(
    ("path", "content_type", "marker"),
    [
        ("/index.html", "text/html;charset=utf-8", b"Dashboard"),
        ("/login", "text/html;charset=utf-8", b'action="/login"'),
        ("/register", "text/html;charset=utf-8", b'action="/register"'),
        ("/401", "text/html;charset=utf-8", b"401"),
        ("/css/styles.css", "text/css;charset=utf-8", b"body"),
        ("/js/scripts.js", "text/javascript;charset=utf-8", b"JSESSIONID"),
    ],
)
def test_static_pages_are_served(
    base_url: str, path: str, content_type: str, marker: bytes
) -> None:
    """Bundled pages are served with the content type for their kind."""
    response = requests.get(f"{base_url}{path}", timeout=5)

    assert response.status_code == 200
    assert response.headers["Content-Type"] == content_type
    assert int(response.headers["Content-Length"]) == len(response.content)
    assert marker in response.content


def test_unknown_path_returns_not_found(base_url: str) -> None:
    """Unmatched routes answer 404 instead of hanging."""
    response = requests.get(f"{base_url}/does-not-exist", timeout=5)

    assert response.status_code == 404
    assert b"404" in response.content


def test_register_then_login_page_is_skipped(base_url: str) -> None:
    """Registration signs the user in; the login form is then bypassed."""
    with requests.Session() as client:
        response = client.post(
            f"{base_url}/register",
            data={"account": "bob", "password": "pw", "email": "e@x.com"},
            allow_redirects=False,
            timeout=5,
        )
        assert response.status_code == 302
        assert response.headers["Location"] == "/index.html"
        assert response.headers["Set-Cookie"].startswith("JSESSIONID=")
        assert client.cookies.get("JSESSIONID")

        login_page = client.get(
            f"{base_url}/login", allow_redirects=False, timeout=5
        )
        assert login_page.status_code == 302
        assert login_page.headers["Location"] == "/index.html"


def test_login_with_seeded_account(base_url: str) -> None:
    """The demo account can sign in with its password."""
    response = requests.post(
        f"{base_url}/login",
        data={"account": "gugu", "password": "password"},
        allow_redirects=False,
        timeout=5,
    )

    assert response.status_code == 302
    assert response.headers["Location"] == "/index.html"
    assert "JSESSIONID" in response.cookies


def test_login_with_wrong_password_redirects_to_401(base_url: str) -> None:
    """Failed logins get no cookie and land on the 401 page."""
    response = requests.post(
        f"{base_url}/login",
        data={"account": "gugu", "password": "nope"},
        allow_redirects=False,
        timeout=5,
    )

    assert response.status_code == 302
    assert response.headers["Location"] == "/401"
    assert "Set-Cookie" not in response.headers

    followed = requests.get(f"{base_url}{response.headers['Location']}", timeout=5)
    assert followed.status_code == 200


def test_malformed_request_gets_400(
    server_process: "ServerProcessInfo",
) -> None:
    """Garbage on the wire is answered, not dropped."""
    raw = send_raw_request(
        server_process["host"], server_process["port"], b"NOT AN HTTP REQUEST\r\n\r\n"
    )

    assert parse_http_response(raw).status_code == 400


def test_truncated_body_does_not_register(
    server_process: "ServerProcessInfo",
) -> None:
    """A body cut short is rejected and leaves no account behind."""
    host, port = server_process["host"], server_process["port"]
    raw = send_raw_request(
        host,
        port,
        b"POST /register HTTP/1.1\r\nContent-Length: 100\r\n\r\naccount=carol",
    )
    assert parse_http_response(raw).status_code == 400

    login = send_raw_request(
        host,
        port,
        b"POST /login HTTP/1.1\r\nContent-Length: 27\r\n\r\n"
        b"account=carol&password=pw12",
    )
    assert parse_http_response(login).headers["location"] == "/401"


def test_empty_connection_is_closed_silently(
    server_process: "ServerProcessInfo",
) -> None:
    """A client that sends nothing receives nothing."""
    raw = send_raw_request(server_process["host"], server_process["port"], b"")

    assert raw == b""
