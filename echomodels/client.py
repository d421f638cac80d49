"""Interactive line-based client for the echo servers."""

from __future__ import annotations

import ipaddress
import socket
import sys
from collections.abc import Iterable
from typing import TextIO

from echomodels.common import PORT, RECV_SIZE, log_error, log_info, log_packet

PROMPT = "Enter message (or 'quit' to exit): "
QUIT_COMMAND = "quit"
USAGE = "Usage: {prog} [--log-packets] <server_ip>"


def parse_address(text: str) -> str:
    """Validate a dotted-quad IPv4 address and return it in canonical form."""
    try:
        return str(ipaddress.IPv4Address(text))
    except ValueError as exc:
        raise ValueError(f"Invalid address: {text!r}") from exc


def run_session(
    sock: socket.socket,
    lines: Iterable[str],
    output: TextIO,
    log_packets: bool = False,
) -> list[str]:
    """Send each input line to the server and print its reply.

    Stops at ``quit``, at the end of input, or when the connection fails.
    Returns the server responses in order.
    """
    responses: list[str] = []
    for raw_line in lines:
        output.write(PROMPT)
        output.flush()
        message = raw_line.split("\n", 1)[0]
        if message == QUIT_COMMAND:
            break

        data = message.encode("utf-8")
        if log_packets:
            log_packet("SEND", data)
        try:
            sock.sendall(data)
        except OSError:
            log_error("send failed")
            break

        try:
            reply = sock.recv(RECV_SIZE)
        except OSError:
            reply = b""
        if not reply:
            log_error("recv failed")
            break

        if log_packets:
            log_packet("RECV", reply)
        text = reply.decode("utf-8", errors="replace")
        output.write(f"Server response: {text}\n")
        output.flush()
        responses.append(text)
    return responses


def main(argv: list[str] | None = None) -> int:
    """Connect to a server on the fixed port and relay lines from standard input."""
    args = list(sys.argv[1:] if argv is None else argv)
    log_packets = "--log-packets" in args
    positional = [arg for arg in args if arg != "--log-packets"]
    if len(positional) != 1:
        print(USAGE.format(prog="echomodels-client"))
        return 1

    try:
        host = parse_address(positional[0])
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        sock = socket.create_connection((host, PORT))
    except OSError as exc:
        print(f"connect failed: {exc}", file=sys.stderr)
        return 1

    with sock:
        log_info(f"Connected to server {positional[0]}:{PORT}")
        run_session(sock, sys.stdin, sys.stdout, log_packets)
    return 0


if __name__ == "__main__":
    sys.exit(main())