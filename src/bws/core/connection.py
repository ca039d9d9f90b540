"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket together with the two buffered streams
the server reads and writes it through.

=============================================================================
THREE HANDLES, THREE CLOSES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       one client connection                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   rfile = socket.makefile("rb")   ← LineReader pulls the head here  │
    │   wfile = socket.makefile("wb")   ← HTTPResponse.write_to() here    │
    │   socket                          ← the TCP endpoint itself         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

close() releases all three, each on its own. A failure closing the output
stream (for instance a flush into a reset connection) is logged and does
not stop the socket itself from being closed.

=============================================================================
LIFECYCLE STATES
=============================================================================

    READING ──► VALIDATING ──► RESOLVING ──► RESPONDING ──► LOGGING ──┐
       │             │              │              │                   │
       └─────────────┴──────────────┴──────────────┴───────────────────┴──► CLOSED

Any state can fall straight through to CLOSED; CLOSED is only ever
entered through close().

=============================================================================
NO TIMEOUTS
=============================================================================

Client sockets are blocking with no timeout. A silent peer holds its
worker thread until it sends something or disconnects; the line reader's
guards only stop peers that send garbage.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid

from .line_reader import LineReader, MAX_LINE_LENGTH, MAX_NULL_RUN


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response exchange."""
    READING = "reading"          # Reading the request head
    VALIDATING = "validating"    # Parsing and checking the head
    RESOLVING = "resolving"      # Dispatching, finding the file
    RESPONDING = "responding"    # Writing the response
    LOGGING = "logging"          # Appending the access log line
    CLOSED = "closed"            # Every handle released


@dataclass
class Connection:
    """
    One accepted client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log messages.
        state: Current lifecycle state.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.READING
    created_at: float = field(default_factory=time.time)

    max_line_length: int = MAX_LINE_LENGTH
    max_null_run: int = MAX_NULL_RUN

    rfile: Optional[BinaryIO] = field(default=None, repr=False)
    wfile: Optional[BinaryIO] = field(default=None, repr=False)
    reader: Optional[LineReader] = field(default=None, repr=False)

    def __post_init__(self):
        # Plain blocking mode: no timeout on client reads or writes.
        self.socket.settimeout(None)

        self.rfile = self.socket.makefile("rb")
        self.wfile = self.socket.makefile("wb")
        self.reader = LineReader(self.rfile, self.max_line_length, self.max_null_run)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def client_port(self) -> int:
        """Get the client port."""
        return self.address[1]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    def close(self) -> None:
        """
        Release the input stream, the output stream and the socket.

        Each close is attempted even if an earlier one failed. Safe to call
        more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        for name, handle in (
            ("stream from the client", self.rfile),
            ("stream to the client", self.wfile),
            ("socket", self.socket),
        ):
            if handle is None:
                continue
            try:
                handle.close()
            except OSError as e:
                logger.error(f"[{self.id}] Failed to close the {name} properly: {e}")

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
