"""Handlers serving fixed text and static pages."""

from http11.domain.http_types import HttpRequest, HttpResponse
from http11.domain.request_context import get_logger
from http11.domain.response_builders import (
    CSS,
    HTML,
    JAVASCRIPT,
    not_found_response,
    resource_response,
    text_response,
)
from http11.handlers.static_resources import ResourceNotFound, StaticResources
from http11.transport.context import WorkerContext

PAGE_LOGGER = get_logger("handlers.page")

ROOT_GREETING = "Hello world!"
NOT_FOUND_PAGE = "/404.html"


def not_found(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    """Answer 404, using the bundled not-found page when it exists."""
    try:
        page = context.resources.load(NOT_FOUND_PAGE)
    except ResourceNotFound:
        page = None
    return not_found_response(request.protocol, page)


def serve_resource(
    request: HttpRequest, context: WorkerContext, path: str, content_type: str
) -> HttpResponse:
    """Load ``path`` from the resource provider, or answer 404."""
    resources: StaticResources = context.resources
    try:
        payload = resources.load(path)
    except ResourceNotFound:
        PAGE_LOGGER.info(
            "Static resource not found",
            extra={"event": "resource_not_found", "route": path},
        )
        return not_found(request, context)
    return resource_response(payload, content_type, request.protocol)


def handle_root(request: HttpRequest, _context: WorkerContext) -> HttpResponse:
    return text_response(ROOT_GREETING, HTML, request.protocol)


def handle_index(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    return serve_resource(request, context, "/index.html", HTML)


def handle_stylesheet(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    return serve_resource(request, context, request.path, CSS)


def handle_script(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    return serve_resource(request, context, request.path, JAVASCRIPT)


def handle_unauthorized_page(
    request: HttpRequest, context: WorkerContext
) -> HttpResponse:
    return serve_resource(request, context, "/401.html", HTML)


def handle_register_page(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    return serve_resource(request, context, "/register.html", HTML)


def handle_login_page(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    return serve_resource(request, context, "/login.html", HTML)


def handle_html_page(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    """Serve any other ``.html`` document under the static root."""
    return serve_resource(request, context, request.path, HTML)
