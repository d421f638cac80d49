"""Shared constants, logging helpers and socket plumbing for the echo servers."""

from __future__ import annotations

import socket
from collections.abc import Callable

PORT = 8081
BUFFER_SIZE = 1024
MAX_CLIENTS = 10
DEBUG_MODE = True

RECV_SIZE = BUFFER_SIZE - 1


def format_packet(direction: str, data: bytes) -> str:
    """Render a packet as a hex dump line followed by an ASCII line."""
    hex_dump = "".join(f"{byte:02x} " for byte in data)
    text = data.decode("utf-8", errors="replace")
    return f"[PACKET] {direction}: {hex_dump}\n[PACKET] {direction} (ASCII): {text}"


def log_info(message: str) -> None:
    """Print an informational line to standard output."""
    print(f"[INFO] {message}", flush=True)


def log_error(message: str) -> None:
    """Print an error line to standard output."""
    print(f"[ERROR] {message}", flush=True)


def log_packet(direction: str, data: bytes) -> None:
    """Print a packet dump when debug mode is on."""
    if DEBUG_MODE:
        print(format_packet(direction, data), flush=True)


def create_server_socket(host: str = "", port: int = PORT, backlog: int = 5) -> socket.socket:
    """Create a TCP socket bound to ``host:port`` and listening.

    Raises ``OSError`` if the socket cannot be bound or put into listening mode.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    return sock


def echo_loop(conn: socket.socket, on_message: Callable[[bytes], None] | None = None) -> int:
    """Echo everything received on ``conn`` back to the peer until it disconnects.

    ``on_message`` is called with each chunk before it is sent back.
    Returns the number of chunks echoed.
    """
    echoed = 0
    while True:
        try:
            data = conn.recv(RECV_SIZE)
        except OSError:
            log_error("recv failed")
            return echoed
        if not data:
            return echoed
        if on_message is not None:
            on_message(data)
        try:
            conn.sendall(data)
        except OSError:
            log_error("send failed")
            return echoed
        echoed += 1