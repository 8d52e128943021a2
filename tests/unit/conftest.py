"""Shared fixtures for unit tests."""

import logging

import pytest

from http11.bootstrap.config import ServerConfig
from http11.domain.session import SessionStore
from http11.domain.users import InMemoryUserRepository, User
from http11.handlers.static_resources import MemoryResources
from http11.transport.context import WorkerContext

PAGES = {
    "/index.html": b"<h1>index</h1>",
    "/login.html": b"<h1>login</h1>",
    "/register.html": b"<h1>register</h1>",
    "/401.html": b"<h1>401</h1>",
    "/404.html": b"<h1>404</h1>",
    "/css/styles.css": b"body { margin: 0; }",
    "/js/scripts.js": b"console.log('hi');",
}


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure logs propagate to root so caplog can catch them."""
    logger = logging.getLogger("http11")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate


@pytest.fixture(name="context")
def context_fixture() -> WorkerContext:
    """Worker context backed by in-memory pages and one known user."""
    return WorkerContext(
        resources=MemoryResources(PAGES),
        sessions=SessionStore(),
        users=InMemoryUserRepository((User("gugu", "password", "gugu@example.com"),)),
        config=ServerConfig(max_body_bytes=1024),
    )

