# echomodels

Four TCP echo servers, each handling clients with a different concurrency
model, and one interactive client for talking to any of them. The servers
listen on every interface, by default on port 8081, and send back whatever
they receive.

## Installation

```
pip install .
```

## Servers

| Command                      | Module                      | Model                                             |
|------------------------------|-----------------------------|---------------------------------------------------|
| `echo-server-single-thread`  | `echomodels.single_thread`  | one process, one client at a time                 |
| `echo-server-multi-thread`   | `echomodels.multi_thread`   | one process, a daemon thread per client           |
| `echo-server-multi-process`  | `echomodels.multi_process`  | a forked child process per client                 |
| `echo-server-prefork`        | `echomodels.prefork`        | pre-forked worker processes, a thread per client  |

Every server accepts `--port N` to listen on another port. The prefork server
also accepts `--workers N` (default 4) to choose how many worker processes to
start. Stop a server with Ctrl-C.

The servers log to standard output with `[INFO]` and `[ERROR]` prefixes. The
single-threaded server also logs every chunk it receives and sends back, as
hex bytes and as text:

```
[PACKET] RECV: 68 65 6c 6c 6f 
[PACKET] RECV (ASCII): hello
```

The servers that fork (`echo-server-multi-process` and `echo-server-prefork`)
install a SIGCHLD handler that reaps finished children, and need a POSIX
system.

## Client

```
echo-client 127.0.0.1
```

The client connects to the given IPv4 address on port 8081. It asks for a line
of text, sends it, and prints the server's reply. Type `quit` to leave; the
client also stops at the end of input or when the connection fails.

```
Enter message (or 'quit' to exit): hello
Server response: hello
```

Add `--log-packets` to print each message sent and each reply received as a
packet dump, in the same form the single-threaded server uses.

## Library use

The building blocks are importable too:

- `echomodels.common.create_server_socket(host, port, backlog)` opens a bound,
  listening TCP socket.
- `echomodels.common.echo_loop(conn, on_message)` echoes on a connected socket
  until the peer closes it and returns how many chunks it echoed.
- `echomodels.common.format_packet(direction, data)` renders the two-line
  packet dump shown above.
- `echomodels.client.parse_address(text)` validates an IPv4 address, raising
  `ValueError` if it is not one.
- `echomodels.client.run_session(sock, lines, output, log_packets)` drives a
  client conversation from any iterable of lines, writes to any text stream,
  and returns the server's replies.
- Each server module has a `serve_forever(server_sock)` that returns once the
  listening socket is closed; `echomodels.prefork.start_workers(server_sock,
  count)` starts worker processes and returns their process ids.

## What it does not do

The client always connects to port 8081 and only to IPv4 addresses; it has no
option for another port. Each reply is read with a single receive of at most
1023 bytes, so a longer reply may be shown in part. The servers have no
connection limit and no configuration file.

## Running the tests

```
pip install .[test]
pytest
```