"""
Unit tests for the Connection wrapper.
"""

import socket

from bws.core.connection import Connection, ConnectionState


def make_connection(**kwargs):
    client, server = socket.socketpair()
    return client, Connection(socket=server, address=("10.0.0.7", 40123), **kwargs)


def test_address_properties():
    client, conn = make_connection()
    with client, conn:
        assert conn.client_ip == "10.0.0.7"
        assert conn.client_port == 40123
        assert len(conn.id) == 8
        assert conn.state == ConnectionState.READING


def test_read_line_uses_limits():
    client, conn = make_connection(max_line_length=4)
    with client, conn:
        assert conn.reader.max_length == 4
        client.sendall(b"abcd\r\n")
        assert conn.reader.read_line() == "abcd"


def test_socket_is_blocking():
    client, conn = make_connection()
    with client, conn:
        assert conn.socket.gettimeout() is None


def test_close_is_idempotent():
    client, conn = make_connection()
    with client:
        conn.close()
        conn.close()

        assert conn.state == ConnectionState.CLOSED
        assert conn.socket.fileno() == -1
        assert client.recv(1) == b""


def test_context_manager_closes():
    client, conn = make_connection()
    with client:
        with conn:
            pass

        assert conn.state == ConnectionState.CLOSED
