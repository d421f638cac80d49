"""Echo server with pre-started worker processes, each serving clients in threads."""

from __future__ import annotations

import argparse
import os
import signal
import socket
import sys
import threading
import time

from echomodels.common import log_error, log_info
from echomodels.multi_process import _PROCESSES, reap_children
from echomodels.multi_thread import _start_thread
from echomodels.single_thread import _accept_clients, _echo_and_close, _peer, _run_server, _text

WORKER_COUNT = 4


def _tag() -> str:
    return f"Thread {threading.get_ident()} in process {os.getpid()}"


def client_handler(conn: socket.socket, address: tuple[str, int]) -> int:
    """Echo messages from one client until it disconnects, then close the connection.

    Returns the number of messages echoed.
    """
    log_info(f"{_tag()} handling client {_peer(address)}")
    return _echo_and_close(
        conn,
        lambda data: log_info(f"{_tag()} received: {_text(data)}"),
        f"{_tag()} exiting",
    )


def worker_loop(server_sock: socket.socket) -> None:
    """Accept clients on the shared socket and serve each in a daemon thread.

    Returns once the listening socket has been closed or shut down.
    """
    pid = os.getpid()
    for conn, address in _accept_clients(server_sock):
        log_info(f"Worker process {pid} accepted connection from {_peer(address)}")
        _start_thread(client_handler, conn, address)


def _worker_main(server_sock: socket.socket) -> None:
    log_info(f"Worker process {os.getpid()} started")
    worker_loop(server_sock)


def start_workers(server_sock: socket.socket, count: int = WORKER_COUNT) -> list[int]:
    """Start ``count`` worker processes that share ``server_sock``.

    Returns the process ids of the workers that were started.
    """
    pids: list[int] = []
    for _ in range(count):
        worker = _PROCESSES.Process(target=_worker_main, args=(server_sock,), daemon=True)
        try:
            worker.start()
        except OSError:
            log_error("fork failed")
            continue
        pids.append(worker.pid)
    return pids


def _supervise(server_sock: socket.socket, args: argparse.Namespace) -> None:
    pids = start_workers(server_sock, args.workers)
    try:
        while True:
            time.sleep(1)
    finally:
        for pid in pids:
            try:
                os.kill(pid, signal.SIGTERM)
            except ProcessLookupError:
                pass


def main(argv: list[str] | None = None) -> int:
    """Start the pre-started, multi-threaded echo server."""
    return _run_server(
        argv,
        "Pre-forked multi-threaded echo server.",
        _supervise,
        extra=(("--workers", WORKER_COUNT),),
        on_sigchld=reap_children,
    )


if __name__ == "__main__":
    sys.exit(main())