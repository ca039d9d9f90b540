"""
=============================================================================
CORE MODULE
=============================================================================

The transport layer: everything that touches raw sockets and bytes.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer     bind / listen / accept                           │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection       one accepted client: socket + buffered files     │
    │        │                                                             │
    │        ▼                                                             │
    │   LineReader       one header line at a time, with size and NUL     │
    │                    flood limits                                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing here knows about HTTP.

=============================================================================
"""

from .line_reader import (
    LineReader,
    TransportError,
    LineTooLongError,
    NullFloodError,
    ConnectionClosedError,
    MAX_LINE_LENGTH,
    MAX_NULL_RUN,
)
from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = [
    "SocketServer",           # Listening socket and accept loop
    "Connection",             # Wrapper for an accepted client socket
    "ConnectionState",        # Where a connection is in its lifecycle
    "LineReader",             # Bounded line reading from a byte stream
    "TransportError",         # Base class: the connection is unusable
    "LineTooLongError",
    "NullFloodError",
    "ConnectionClosedError",
    "MAX_LINE_LENGTH",
    "MAX_NULL_RUN",
]
