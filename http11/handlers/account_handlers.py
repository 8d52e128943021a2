"""Registration and login handlers that establish sessions."""

from typing import Mapping

from http11.domain.cookies import set_cookie_value
from http11.domain.http_types import HttpRequest, HttpResponse
from http11.domain.request_context import get_logger
from http11.domain.response_builders import (
    bad_request_response,
    conflict_response,
    redirect_response,
)
from http11.domain.session import Session
from http11.domain.users import User
from http11.transport.context import WorkerContext

ACCOUNT_LOGGER = get_logger("handlers.account")

HOME_LOCATION = "/index.html"
UNAUTHORIZED_LOCATION = "/401"
REGISTRATION_FIELDS = ("account", "password", "email")


def start_session(context: WorkerContext, user: User) -> Session:
    """Create a session holding ``user`` under its account name."""
    session = Session()
    session.set_attribute(user.account, user)
    context.sessions.add(session)
    ACCOUNT_LOGGER.info(
        "Session created",
        extra={
            "event": "session_created",
            "account": user.account,
            "session_id": session.id,
        },
    )
    return session


def _authenticated_redirect(
    request: HttpRequest, context: WorkerContext, user: User
) -> HttpResponse:
    session = start_session(context, user)
    return redirect_response(
        HOME_LOCATION, request.protocol, set_cookie=set_cookie_value(session.id)
    )


def handle_register(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    """Create an account from the submitted form and sign it in."""
    form = request.body
    if any(not form.get(name, "").strip() for name in REGISTRATION_FIELDS):
        ACCOUNT_LOGGER.info(
            "Registration rejected: missing fields",
            extra={"event": "registration_invalid"},
        )
        return bad_request_response(request.protocol)

    account = form["account"].strip()
    if context.users.find_by_account(account) is not None:
        ACCOUNT_LOGGER.info(
            "Registration rejected: account exists",
            extra={"event": "registration_conflict", "account": account},
        )
        return conflict_response(f"Account {account} already exists", request.protocol)

    user = User(account, form["password"], form["email"].strip())
    context.users.save(user)
    ACCOUNT_LOGGER.info(
        "User registered", extra={"event": "user_registered", "account": account}
    )
    return _authenticated_redirect(request, context, user)


def _login(
    request: HttpRequest, context: WorkerContext, credentials: Mapping[str, str]
) -> HttpResponse:
    account = credentials.get("account")
    user = context.users.find_by_account(account)
    if user is None or not user.check_password(credentials.get("password")):
        reason = "unknown_account" if user is None else "credentials_mismatch"
        ACCOUNT_LOGGER.info(
            "Login failed",
            extra={
                "event": "login_failed",
                "account": account or "",
                "error_type": reason,
            },
        )
        return redirect_response(UNAUTHORIZED_LOCATION, request.protocol)

    ACCOUNT_LOGGER.info(
        "Login succeeded", extra={"event": "login_succeeded", "account": user.account}
    )
    return _authenticated_redirect(request, context, user)


def handle_login(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    """Authenticate the submitted form credentials."""
    return _login(request, context, request.body)


def handle_query_login(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    """Authenticate ``/login?account=..&password=..`` links."""
    return _login(request, context, request.request_line.query_params)
