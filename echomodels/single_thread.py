"""Echo server that serves one client at a time in a single thread."""

from __future__ import annotations

import argparse
import errno
import signal
import socket
import sys
from collections.abc import Callable, Iterator
from typing import Any

from echomodels.common import (
    PORT,
    create_server_socket,
    echo_loop,
    log_error,
    log_info,
    log_packet,
)

_STOP_ERRNOS = {errno.EBADF, errno.EINVAL}

Address = tuple[str, int]


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _peer(address: Address) -> str:
    return f"{address[0]}:{address[1]}"


def _echo_and_close(conn: socket.socket, on_message: Callable[[bytes], None], farewell: str) -> int:
    """Echo on ``conn`` until the peer leaves, close it and log ``farewell``."""
    with conn:
        count = echo_loop(conn, on_message)
    log_info(farewell)
    return count


def _accept_clients(server_sock: socket.socket) -> Iterator[tuple[socket.socket, Address]]:
    """Yield accepted connections until the listening socket is closed or shut down."""
    while True:
        try:
            accepted = server_sock.accept()
        except OSError as exc:
            if server_sock.fileno() < 0 or exc.errno in _STOP_ERRNOS:
                return
            if not isinstance(exc, TimeoutError):
                log_error("accept failed")
            continue
        yield accepted


def _run_server(
    argv: list[str] | None,
    description: str,
    serve: Callable[[socket.socket, argparse.Namespace], None],
    *,
    extra: tuple[tuple[str, int], ...] = (),
    on_sigchld: Callable[..., Any] | None = None,
) -> int:
    """Parse arguments, bind the listening socket and run ``serve`` on it."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--port", type=int, default=PORT)
    for flag, default in extra:
        parser.add_argument(flag, type=int, default=default)
    args = parser.parse_args(argv)

    if on_sigchld is not None:
        signal.signal(signal.SIGCHLD, on_sigchld)

    try:
        server_sock = create_server_socket("", args.port, 5)
    except OSError as exc:
        print(f"bind failed: {exc}", file=sys.stderr)
        return 1

    with server_sock:
        log_info(f"Server started on port {args.port}")
        try:
            serve(server_sock, args)
        except KeyboardInterrupt:
            pass
    return 0


def _log_message(data: bytes) -> None:
    log_packet("RECV", data)
    log_info(f"Received: {_text(data)}")
    log_packet("SEND", data)


def handle_connection(conn: socket.socket, address: Address) -> int:
    """Echo messages on ``conn`` until the client leaves, then close it.

    Returns the number of messages echoed.
    """
    return _echo_and_close(conn, _log_message, "Connection closed")


def serve_forever(server_sock: socket.socket) -> None:
    """Accept clients one after another and serve each to completion.

    Returns once the listening socket has been closed or shut down.
    """
    for conn, address in _accept_clients(server_sock):
        log_info(f"New connection from {_peer(address)}")
        handle_connection(conn, address)


def main(argv: list[str] | None = None) -> int:
    """Start the single-threaded echo server."""
    return _run_server(argv, "Single-threaded echo server.", lambda sock, _args: serve_forever(sock))


if __name__ == "__main__":
    sys.exit(main())