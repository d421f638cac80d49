import socket
import threading

import pytest

from echomodels.common import create_server_socket
from echomodels.multi_thread import client_handler, main, serve_forever


@pytest.mark.parametrize(("payload", "expected"), [(b"hello", 1), (b"", 0)])
def test_client_handler_echoes_then_closes(payload, expected, capsys):
    ours, theirs = socket.socketpair()
    with theirs:
        theirs.sendall(payload)
        theirs.shutdown(socket.SHUT_WR)
        assert client_handler(ours, ("127.0.0.1", 5000)) == expected
        assert theirs.recv(1023) == payload
    assert ours.fileno() == -1
    out = capsys.readouterr().out
    assert "Thread started for client 127.0.0.1:5000" in out
    assert ("Received from 127.0.0.1:5000: hello" in out) == bool(payload)
    assert "Client connection closed" in out


def test_serve_forever_handles_clients_concurrently():
    listener = create_server_socket("127.0.0.1", 0, 5)
    listener.settimeout(0.1)
    address = ("127.0.0.1", listener.getsockname()[1])
    acceptor = threading.Thread(target=serve_forever, args=(listener,), daemon=True)
    acceptor.start()
    try:
        clients = [socket.create_connection(address, timeout=5) for _ in range(2)]
        for client, word in zip(reversed(clients), (b"second", b"first")):
            client.sendall(word)
            assert client.recv(1023) == word
        for client in clients:
            client.close()
    finally:
        listener.close()
    acceptor.join(5)
    assert not acceptor.is_alive()


def test_main_exits_with_failure_when_bind_fails():
    occupied = create_server_socket("", 0, 1)
    with occupied:
        assert main([f"--port={occupied.getsockname()[1]}"]) == 1


def test_main_rejects_bad_port():
    with pytest.raises(SystemExit):
        main(["--port", "not-a-port"])