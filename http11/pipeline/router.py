"""Request routing logic."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from http11.domain.cookies import HttpCookie
from http11.domain.http_types import HttpRequest, HttpResponse, RequestLine
from http11.domain.request_context import get_logger
from http11.domain.response_builders import redirect_response
from http11.handlers import account_handlers, page_handlers
from http11.transport.context import WorkerContext

ROUTER_LOGGER = get_logger("pipeline.router")

Handler = Callable[[HttpRequest, WorkerContext], HttpResponse]
Matcher = Callable[[RequestLine], bool]


@dataclass(frozen=True)
class Route:
    """One entry of the dispatch table."""

    name: str
    matches: Matcher
    handler: Handler


def _is_login_page(line: RequestLine) -> bool:
    return line.is_get and line.is_path("/login") and not line.has_query


DEFAULT_ROUTES: tuple[Route, ...] = (
    Route(
        "GET /", lambda line: line.is_get and line.is_root, page_handlers.handle_root
    ),
    Route(
        "GET /index.html",
        lambda line: line.is_get and line.is_index,
        page_handlers.handle_index,
    ),
    Route(
        "GET *.css",
        lambda line: line.is_get and line.is_css,
        page_handlers.handle_stylesheet,
    ),
    Route(
        "GET *.js",
        lambda line: line.is_get and line.is_js,
        page_handlers.handle_script,
    ),
    Route(
        "GET /401",
        lambda line: line.is_get and line.is_path("/401", "/401.html"),
        page_handlers.handle_unauthorized_page,
    ),
    Route(
        "GET /register",
        lambda line: line.is_get and line.is_path("/register"),
        page_handlers.handle_register_page,
    ),
    Route(
        "POST /register",
        lambda line: line.is_post and line.is_path("/register"),
        account_handlers.handle_register,
    ),
    Route("GET /login", _is_login_page, page_handlers.handle_login_page),
    Route(
        "GET /login?query",
        lambda line: line.is_get and line.is_path("/login") and line.has_query,
        account_handlers.handle_query_login,
    ),
    Route(
        "POST /login",
        lambda line: line.is_post and line.is_path("/login"),
        account_handlers.handle_login,
    ),
    Route(
        "GET *.html",
        lambda line: line.is_get and line.has_suffix(".html"),
        page_handlers.handle_html_page,
    ),
)


class Router:
    """Ordered dispatch table; the first matching route handles the request."""

    def __init__(self, routes: Sequence[Route] = DEFAULT_ROUTES) -> None:
        self._routes = tuple(routes)

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def match(self, request_line: RequestLine) -> Optional[Route]:
        for route in self._routes:
            if route.matches(request_line):
                return route
        return None

    def route_request(
        self, request: HttpRequest, context: WorkerContext
    ) -> HttpResponse:
        """Route the request to exactly one handler and return its response."""
        line = request.request_line
        if _is_login_page(line) and _has_live_session(request, context):
            ROUTER_LOGGER.info(
                "Authenticated client skipped login page",
                extra={"event": "login_bypassed", "route": line.path},
            )
            return redirect_response(
                account_handlers.HOME_LOCATION, request.protocol
            )

        route = self.match(line)
        if route is None:
            ROUTER_LOGGER.info(
                "No matching route found",
                extra={
                    "event": "route_not_found",
                    "route": line.path,
                    "method": line.method.value,
                },
            )
            return page_handlers.not_found(request, context)

        if ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            ROUTER_LOGGER.debug(
                "Route matched", extra={"event": "route_matched", "route": route.name}
            )
        return route.handler(request, context)


def _has_live_session(request: HttpRequest, context: WorkerContext) -> bool:
    cookie = HttpCookie.parse(request.cookie_header)
    return context.sessions.find(cookie.session_id) is not None


def route_request(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    """Route with the default dispatch table."""
    return Router().route_request(request, context)
