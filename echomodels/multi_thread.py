"""Echo server that serves each client in its own thread."""

from __future__ import annotations

import socket
import sys
import threading
from collections.abc import Callable

from echomodels.common import log_error, log_info
from echomodels.single_thread import _accept_clients, _echo_and_close, _peer, _run_server, _text


def _start_thread(handler: Callable[..., object], conn: socket.socket, address: tuple[str, int]) -> None:
    """Serve ``conn`` with ``handler`` in a new daemon thread."""
    worker = threading.Thread(target=handler, args=(conn, address), daemon=True)
    try:
        worker.start()
    except RuntimeError:
        log_error("thread creation failed")
        conn.close()


def client_handler(conn: socket.socket, address: tuple[str, int]) -> int:
    """Echo messages from one client until it disconnects, then close the connection.

    Returns the number of messages echoed.
    """
    peer = _peer(address)
    log_info(f"Thread started for client {peer}")
    return _echo_and_close(
        conn,
        lambda data: log_info(f"Received from {peer}: {_text(data)}"),
        "Client connection closed",
    )


def serve_forever(server_sock: socket.socket) -> None:
    """Accept clients and hand each one to a new daemon thread.

    Returns once the listening socket has been closed or shut down.
    """
    for conn, address in _accept_clients(server_sock):
        log_info(f"New connection from {_peer(address)}")
        _start_thread(client_handler, conn, address)


def main(argv: list[str] | None = None) -> int:
    """Start the thread-per-client echo server."""
    return _run_server(argv, "Thread-per-client echo server.", lambda sock, _args: serve_forever(sock))


if __name__ == "__main__":
    sys.exit(main())