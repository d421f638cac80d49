import socket
import threading

import pytest

from echomodels import common
from echomodels.common import (
    create_server_socket,
    echo_loop,
    format_packet,
    log_error,
    log_info,
    log_packet,
)


@pytest.mark.parametrize(
    ("direction", "data", "expected"),
    [
        ("SEND", b"hi", "[PACKET] SEND: 68 69 \n[PACKET] SEND (ASCII): hi"),
        ("SEND", b"", "[PACKET] SEND: \n[PACKET] SEND (ASCII): "),
    ],
)
def test_format_packet_pins_hex_and_ascii_lines(direction, data, expected):
    assert format_packet(direction, data) == expected


def test_format_packet_has_one_hex_pair_per_byte():
    data = bytes(range(32, 64))
    first, second = format_packet("RECV", data).split("\n")
    pairs = first[len("[PACKET] RECV: "):].split()
    assert [int(pair, 16) for pair in pairs] == list(data)
    assert second == "[PACKET] RECV (ASCII): " + data.decode()


def test_log_functions_print_prefixed_lines(capsys):
    log_info("Server started")
    log_error("accept failed")
    log_packet("RECV", b"abc")
    out = capsys.readouterr().out
    expected = "[INFO] Server started\n[ERROR] accept failed\n" + format_packet("RECV", b"abc") + "\n"
    assert out == expected


@pytest.mark.parametrize(("payload", "expected_count"), [(b"hello", 1), (b"", 0)])
def test_echo_loop_counts_and_reports_messages(payload, expected_count):
    left, right = socket.socketpair()
    seen = []
    with left, right:
        if payload:
            right.sendall(payload)
        right.shutdown(socket.SHUT_WR)
        count = echo_loop(left, seen.append)
        left.shutdown(socket.SHUT_WR)
        assert right.recv(100) == payload
    assert count == expected_count
    assert seen == ([payload] if payload else [])


def test_echo_loop_splits_large_input_into_buffer_sized_chunks():
    left, right = socket.socketpair()
    payload = b"x" * (common.RECV_SIZE * 3)
    seen = []
    received = bytearray()

    def reader():
        while len(received) < len(payload):
            chunk = right.recv(4096)
            if not chunk:
                break
            received.extend(chunk)

    with left, right:
        thread = threading.Thread(target=reader)
        thread.start()
        right.sendall(payload)
        right.shutdown(socket.SHUT_WR)
        echo_loop(left, seen.append)
        thread.join(timeout=5)
    assert bytes(received) == payload
    assert all(len(chunk) <= common.RECV_SIZE for chunk in seen)
    assert b"".join(seen) == payload


def test_create_server_socket_accepts_and_holds_its_port():
    server = create_server_socket("127.0.0.1", 0, 5)
    with server:
        port = server.getsockname()[1]
        with socket.create_connection(("127.0.0.1", port)) as client:
            conn, _ = server.accept()
            with conn:
                client.sendall(b"ping")
                assert conn.recv(10) == b"ping"
        with pytest.raises(OSError):
            create_server_socket("127.0.0.1", port, 5)