"""
=============================================================================
LINE READER
=============================================================================

Reads the request head one line at a time, straight off the connection's
buffered input stream.

=============================================================================
WHY READ BYTE BY BYTE?
=============================================================================

The server never reads a request body, so it has no reason to pull more
from the socket than the header block. Reading one byte at a time from a
BUFFERED stream (socket.makefile("rb")) costs a method call per byte, not a
recv() per byte: the buffer refills in large chunks behind the scenes.

    socket ──recv(8192)──► BufferedReader ──read(1)──► LineReader
                                                         │
                                            "GET / HTTP/1.1"

=============================================================================
GUARDS
=============================================================================

    ┌───────────────────┬──────────────────────────────────────────────┐
    │ Guard             │ Trips when                                   │
    ├───────────────────┼──────────────────────────────────────────────┤
    │ Overflow          │ a line grows past max_length bytes           │
    │ Null flood        │ more than max_null_run NUL bytes in a row    │
    │ Early close       │ the peer closes before the line terminator   │
    └───────────────────┴──────────────────────────────────────────────┘

Some clients open a connection and then trickle zero bytes instead of a
request or a FIN. The null-flood guard drops those connections instead of
letting them fill the line buffer.

All three are TRANSPORT errors: the request may not even be parsed yet, so
none of them is ever turned into an HTTP response.

=============================================================================
"""

import logging
from typing import BinaryIO


logger = logging.getLogger(__name__)


MAX_LINE_LENGTH = 32768
MAX_NULL_RUN = 16


class TransportError(IOError):
    """Base class for connection failures that never produce a response."""


class LineTooLongError(TransportError):
    """A single line exceeded the reader's maximum length."""


class NullFloodError(TransportError):
    """The peer sent a run of NUL bytes instead of a request."""


class ConnectionClosedError(TransportError):
    """The peer closed the stream in the middle of a line."""


class LineReader:
    """
    Line-oriented reader over a binary stream.

    Only LF ends a line. CR bytes are discarded wherever they appear, so
    both "GET / HTTP/1.1\\r\\n" and "GET / HTTP/1.1\\n" read as the same
    line. Lines are decoded as ISO-8859-1, which maps every byte to one
    character, so TRACE can echo the header block back byte for byte.

    Usage:
        reader = LineReader(sock.makefile("rb"))
        request_line = reader.read_line()
    """

    def __init__(
        self,
        stream: BinaryIO,
        max_length: int = MAX_LINE_LENGTH,
        max_null_run: int = MAX_NULL_RUN,
    ):
        self.stream = stream
        self.max_length = max_length
        self.max_null_run = max_null_run

    def read_line(self) -> str:
        """
        Read one line, terminator stripped.

        Returns:
            The line's text; "" for a blank line.

        Raises:
            LineTooLongError: Line longer than max_length bytes.
            NullFloodError: More than max_null_run consecutive NUL bytes.
            ConnectionClosedError: Stream ended before LF.
        """
        line = bytearray()
        null_run = 0

        while True:
            byte = self.stream.read(1)
            if not byte:
                raise ConnectionClosedError(
                    f"Connection closed after {len(line)} bytes of an unfinished line"
                )

            if byte == b"\n":
                break
            if byte == b"\r":
                continue

            if byte == b"\x00":
                null_run += 1
                if null_run > self.max_null_run:
                    raise NullFloodError(f"Connection flooded with {null_run} NUL bytes")
            else:
                null_run = 0

            line += byte
            if len(line) > self.max_length:
                raise LineTooLongError(f"Line exceeded {self.max_length} bytes")

        return line.decode("iso-8859-1")
