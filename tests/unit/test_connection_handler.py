"""
Unit tests for the per-connection request flow.
"""

import socket

import pytest

from bws.access_log import AccessLog
from bws.core.connection import Connection, ConnectionState
from bws.handlers.connection import ConnectionHandler
from bws.http.request import RequestParser


@pytest.fixture
def access_log(tmp_path) -> AccessLog:
    return AccessLog(tmp_path / "access-log.txt")


@pytest.fixture
def handler(dispatcher, access_log) -> ConnectionHandler:
    return ConnectionHandler(RequestParser(), dispatcher, access_log)


@pytest.fixture
def pair():
    """(client socket, server-side Connection) joined by a socketpair."""
    client, server = socket.socketpair()
    client.settimeout(5.0)
    conn = Connection(socket=server, address=("127.0.0.1", 5555))
    yield client, conn
    client.close()
    conn.close()


def exchange(handler, pair, raw: bytes, half_close: bool = False) -> bytes:
    client, conn = pair
    client.sendall(raw)
    if half_close:
        client.shutdown(socket.SHUT_WR)
    handler(conn)

    chunks = []
    while True:
        try:
            chunk = client.recv(65536)
        except ConnectionResetError:
            # Closing with unread input resets the peer.
            break
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def log_lines(access_log):
    if not access_log.path.exists():
        return []
    return access_log.path.read_text().splitlines()


class TestSuccessfulExchange:

    def test_get(self, handler, pair, access_log, parse_response, index_html):
        raw = exchange(handler, pair, b"GET / HTTP/1.1\r\nHost: x\r\n\r\n")
        status, headers, body = parse_response(raw)

        assert status == "HTTP/1.1 200 OK"
        assert body == index_html
        assert log_lines(access_log)[0].endswith('- 127.0.0.1 "GET / HTTP/1.1" 200 OK')

    def test_connection_closed_afterwards(self, handler, pair):
        exchange(handler, pair, b"GET / HTTP/1.0\r\n\r\n")

        assert pair[1].state == ConnectionState.CLOSED

    def test_handle_returns_response(self, handler, pair):
        client, conn = pair
        client.sendall(b"TRACE / HTTP/1.0\r\n\r\n")

        response = handler.handle(conn)

        assert response.status_text == "200 OK"
        assert conn.state == ConnectionState.LOGGING


class TestErrorExchange:

    def test_bad_request(self, handler, pair, access_log, parse_response):
        raw = exchange(handler, pair, b"GET /\r\n\r\n")
        status, headers, body = parse_response(raw)

        assert status == "HTTP/1.1 400 Bad Request"
        assert body == b"<h1>Bad Request</h1>\r\n"
        assert log_lines(access_log)[0].endswith('"GET /" 400 Bad Request')

    def test_empty_request_is_bad_request(self, handler, pair, access_log, parse_response):
        status, _, _ = parse_response(exchange(handler, pair, b"\r\n"))

        assert status == "HTTP/1.1 400 Bad Request"
        assert log_lines(access_log)[0].endswith('"" 400 Bad Request')

    def test_head_error_has_no_body(self, handler, pair, parse_response):
        raw = exchange(handler, pair, b"HEAD /missing HTTP/1.0\r\n\r\n")
        status, headers, body = parse_response(raw)

        assert status == "HTTP/1.1 404 Not Found"
        assert headers["Content-Length"] == "25"
        assert body == b""

    def test_head_bad_request_has_no_body(self, handler, pair, parse_response):
        raw = exchange(handler, pair, b"HEAD / HTTP/1.1\r\n\r\n")
        status, _, body = parse_response(raw)

        assert status == "HTTP/1.1 400 Bad Request"
        assert body == b""

    def test_not_implemented(self, handler, pair, parse_response):
        status, _, body = parse_response(exchange(handler, pair, b"DELETE / HTTP/1.0\r\n\r\n"))

        assert status == "HTTP/1.1 501 Not Implemented"
        assert body == b"<h1>Not Implemented</h1>\r\n"


class TestTransportFailure:

    def test_eof_mid_head_sends_nothing(self, handler, pair, access_log):
        raw = exchange(handler, pair, b"GET / HTTP/1.1\r\nHost", half_close=True)

        assert raw == b""
        assert log_lines(access_log) == []

    def test_null_flood_sends_nothing(self, handler, pair, access_log):
        raw = exchange(handler, pair, b"\x00" * 64 + b"\r\n\r\n")

        assert raw == b""
        assert log_lines(access_log) == []

    def test_connection_still_closed(self, handler, pair):
        exchange(handler, pair, b"", half_close=True)

        assert pair[1].state == ConnectionState.CLOSED


def test_unexpected_error_is_logged_not_raised(pair, access_log, caplog):
    class Exploding:
        server_name = "bws"

        def dispatch(self, request, now):
            raise RuntimeError("boom")

    handler = ConnectionHandler(RequestParser(), Exploding(), access_log)

    exchange(handler, pair, b"GET / HTTP/1.0\r\n\r\n")

    assert "boom" in caplog.text
    assert pair[1].state == ConnectionState.CLOSED
