"""Echo server that starts a child process for each client."""

from __future__ import annotations

import multiprocessing
import os
import socket
import sys
from types import FrameType

from echomodels.common import log_error, log_info
from echomodels.single_thread import _accept_clients, _echo_and_close, _peer, _run_server, _text

_PROCESSES = multiprocessing.get_context("fork")


def reap_children(signo: int = 0, frame: FrameType | None = None) -> list[int]:
    """Collect every child that has already exited, without blocking.

    Suitable as a SIGCHLD handler. Returns the reaped process ids.
    """
    reaped: list[int] = []
    while True:
        try:
            pid, _status = os.waitpid(-1, os.WNOHANG)
        except ChildProcessError:
            break
        if pid == 0:
            break
        reaped.append(pid)
    return reaped


def handle_child(conn: socket.socket) -> int:
    """Echo messages on ``conn`` in the current process, then close it.

    Returns the number of messages echoed.
    """
    pid = os.getpid()
    return _echo_and_close(
        conn,
        lambda data: log_info(f"Child process {pid} received: {_text(data)}"),
        f"Child process {pid} exiting",
    )


def _serve_client(server_sock: socket.socket, conn: socket.socket) -> None:
    server_sock.close()
    handle_child(conn)


def serve_forever(server_sock: socket.socket) -> None:
    """Accept clients and start a child process to serve each one.

    Returns once the listening socket has been closed or shut down.
    """
    for conn, address in _accept_clients(server_sock):
        log_info(f"New connection from {_peer(address)}")
        child = _PROCESSES.Process(target=_serve_client, args=(server_sock, conn))
        try:
            child.start()
        except OSError:
            log_error("fork failed")
        conn.close()


def main(argv: list[str] | None = None) -> int:
    """Start the process-per-client echo server."""
    return _run_server(
        argv,
        "Process-per-client echo server.",
        lambda sock, _args: serve_forever(sock),
        on_sigchld=reap_children,
    )


if __name__ == "__main__":
    sys.exit(main())