"""Server configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


BUNDLED_STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

DEFAULT_HOST = os.getenv("HTTP11_HOST", "localhost")
DEFAULT_PORT = _env_int("HTTP11_PORT", 8080)
DEFAULT_MAX_BODY_BYTES = _env_int("HTTP11_MAX_BODY_BYTES", 1024 * 1024)
DEFAULT_SOCKET_TIMEOUT = _env_int("HTTP11_SOCKET_TIMEOUT", 30)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("HTTP11_SHUTDOWN_GRACE_SECONDS", 10)
DEFAULT_LOG_JSON = _env_bool("HTTP11_LOG_JSON", True)
DEFAULT_SEED_USER = _env_bool("HTTP11_SEED_USER", True)

CRLF = "\r\n"
MAX_LINE_BYTES = 8192
MAX_HEADERS = 100
ALLOWED_METHODS = {"GET", "POST"}
SESSION_COOKIE_NAME = "JSESSIONID"

# Demo account available right after startup when seeding is enabled.
SEED_ACCOUNT = ("gugu", "password", "gugu@example.com")


@dataclass
class ServerConfig:
    """Runtime settings shared by the accept loop and connection workers."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    static_dir: str = str(BUNDLED_STATIC_DIR)
    socket_timeout: int = DEFAULT_SOCKET_TIMEOUT
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ServerConfig":
        """Build the configuration from parsed CLI arguments."""
        return cls(
            host=args.host,
            port=args.port,
            static_dir=args.static_dir,
            socket_timeout=args.socket_timeout,
            shutdown_grace_seconds=args.shutdown_grace_seconds,
            max_body_bytes=args.max_body_bytes,
        )


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(description="HTTP/1.1 session server")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--static-dir",
        default=os.getenv("HTTP11_STATIC_DIR", str(BUNDLED_STATIC_DIR)),
        help="Directory holding index.html, login.html and friends",
    )
    default_log_level = os.getenv("HTTP11_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("HTTP11_LOG_DESTINATION", "stdout")
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-json",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_LOG_JSON,
        help="Emit structured JSON log lines",
    )
    parser.add_argument(
        "--socket-timeout",
        type=int,
        default=DEFAULT_SOCKET_TIMEOUT,
        help="Socket timeout in seconds for reading a request and writing the reply",
    )
    parser.add_argument(
        "--shutdown-grace-seconds",
        type=int,
        default=DEFAULT_SHUTDOWN_GRACE_SECONDS,
        help="Grace period in seconds for in-flight connections on shutdown",
    )
    parser.add_argument(
        "--max-body-bytes",
        type=int,
        default=DEFAULT_MAX_BODY_BYTES,
        help="Largest accepted request body",
    )
    parser.add_argument(
        "--seed-user",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_SEED_USER,
        help="Register the demo account on startup",
    )
    return parser.parse_args(argv)
