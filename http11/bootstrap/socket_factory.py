"""Listening socket creation."""

import socket

ACCEPT_TIMEOUT_SECONDS = 0.5


def create_server_socket(host: str, port: int) -> socket.socket:
    """Create the listening socket; accept() wakes up periodically to check for stop."""
    server_socket = socket.create_server((host, port), reuse_port=False)
    server_socket.settimeout(ACCEPT_TIMEOUT_SECONDS)
    return server_socket
