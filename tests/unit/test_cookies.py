"""Unit tests for Cookie header parsing."""

import pytest

from http11.domain.cookies import HttpCookie, set_cookie_value


def test_session_cookie_is_extracted():
    """JSESSIONID is found among other cookies."""
    cookie = HttpCookie.parse("JSESSIONID=abc; other=1")

    assert cookie.session_id == "abc"
    assert dict(cookie) == {"JSESSIONID": "abc", "other": "1"}


@pytest.mark.parametrize("header", [None, "", "novalue", "  ;  ; ", "=orphan"])
def test_malformed_or_missing_headers_yield_nothing(header):
    """Malformed input degrades to no cookies rather than an error."""
    cookie = HttpCookie.parse(header)

    assert len(cookie) == 0
    assert cookie.session_id is None


def test_malformed_pairs_are_skipped_but_valid_ones_kept():
    """Only pairs with '=' survive."""
    cookie = HttpCookie.parse("broken; JSESSIONID=xyz;yummy_cookie=choco")

    assert cookie.session_id == "xyz"
    assert cookie["yummy_cookie"] == "choco"
    assert "broken" not in cookie


def test_names_are_case_sensitive_and_values_split_on_first_equals():
    """Values may contain '='; lookups are exact."""
    cookie = HttpCookie.parse("jsessionid=lower; token=a=b")

    assert cookie.session_id is None
    assert cookie["token"] == "a=b"


def test_set_cookie_value_uses_session_cookie_name():
    """The Set-Cookie value carries the session id."""
    assert set_cookie_value("abc-123") == "JSESSIONID=abc-123"
