"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the header lines read off a connection into a structured HTTPRequest,
enforcing the small HTTP/1.x subset this server speaks.

=============================================================================
WHAT WE ACCEPT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /docs/ HTTP/1.1          ← request line: exactly 3 tokens      │
    │  ─┬─ ──┬─── ───┬────                                                │
    │   │    │       └── must start with "HTTP/"                          │
    │   │    └────────── must start with "/"                              │
    │   └─────────────── one of VALID_METHODS (case-sensitive)            │
    │                                                                      │
    │  Host: example.com            ← required when the version is 1.1    │
    │  User-Agent: curl/8.0                                                │
    │                               ← blank line ends the head            │
    └─────────────────────────────────────────────────────────────────────┘

No request body is ever read, whatever the method.

=============================================================================
THE 64-LINE CAP
=============================================================================

read_request_head() stores at most 64 lines. Once the cap is reached it
stops reading: the rest of the head is neither stored nor rejected. A
request with a huge header block is served from its first 64 lines.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from ..core.line_reader import LineReader
from .errors import ErrorKind, RequestError


logger = logging.getLogger(__name__)


MAX_HEADER_LINES = 64


def read_request_head(reader: LineReader, max_lines: int = MAX_HEADER_LINES) -> List[str]:
    """
    Read header lines up to the blank line or the line cap.

    Args:
        reader: Line reader over the connection's input stream.
        max_lines: Maximum number of lines stored (and read).

    Returns:
        The lines in the order received, request line first.

    Raises:
        TransportError: From the line reader; nothing was parsed.
    """
    lines: List[str] = []
    while len(lines) < max_lines:
        line = reader.read_line()
        if not line:
            break
        logger.debug(f"({len(lines)}) {line}")
        lines.append(line)
    return lines


@dataclass
class HTTPRequest:
    """
    A validated request head.

    Only RequestParser builds these, so every instance has a valid
    request line.

    Attributes:
        method: One of RequestParser.VALID_METHODS.
        path: Request target exactly as sent; starts with "/".
        version: Version token, e.g. "HTTP/1.1".
        header_lines: Every stored line, request line first, in the order
                      received. TRACE echoes these back verbatim.
        client_address: (ip, port) of the peer.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    header_lines: List[str] = field(default_factory=list)
    client_address: Tuple[str, int] = ("", 0)

    @property
    def protocol_version(self) -> str:
        """Version number without the "HTTP/" prefix: "1.0", "1.1"."""
        return self.version[len("HTTP/"):]

    @property
    def request_line(self) -> str:
        """The first line of the request."""
        return self.header_lines[0] if self.header_lines else ""

    def get_header(self, name: str) -> Optional[str]:
        """
        Case-insensitive header lookup.

        The key is the text before the first colon, the value everything
        after it; both are trimmed. Lines without a colon are skipped.

        Returns:
            The first matching value, or None if no line matches.
        """
        wanted = name.strip().lower()
        for line in self.header_lines[1:]:
            key, sep, value = line.partition(":")
            if sep and key.strip().lower() == wanted:
                return value.strip()
        return None


class RequestParser:
    """
    Validates header lines and builds HTTPRequest objects.

    Every failure raises RequestError(BAD_REQUEST). Methods outside GET,
    HEAD and TRACE still parse here: the dispatcher answers them with 501.
    """

    VALID_METHODS = (
        "OPTIONS",
        "GET",
        "HEAD",
        "POST",
        "PUT",
        "DELETE",
        "TRACE",
        "CONNECT",
    )

    def parse(
        self,
        lines: List[str],
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse a request head.

        Args:
            lines: Header lines from read_request_head().
            client_address: Peer (ip, port), kept on the request.

        Returns:
            The validated request.

        Raises:
            RequestError: BAD_REQUEST for any syntax or validation failure.
                          Once the method token is accepted it rides along
                          on the error, so a bad HEAD request still gets a
                          body-less answer.
        """
        if not lines:
            raise RequestError(ErrorKind.BAD_REQUEST, "Empty request")

        tokens = lines[0].split()
        if len(tokens) != 3:
            raise RequestError(ErrorKind.BAD_REQUEST, f"Invalid request line: {lines[0]!r}")

        method, path, version = tokens
        if method not in self.VALID_METHODS:
            logger.debug(f"Method not valid: {method}")
            raise RequestError(ErrorKind.BAD_REQUEST, f"Invalid method: {method}")

        if not path.startswith("/"):
            raise RequestError(ErrorKind.BAD_REQUEST, f"Invalid path: {path}", method=method)

        if not version.startswith("HTTP/"):
            raise RequestError(ErrorKind.BAD_REQUEST, f"Invalid version: {version}", method=method)

        request = HTTPRequest(
            method=method,
            path=path,
            version=version,
            header_lines=list(lines),
            client_address=client_address,
        )

        # HTTP/1.1 makes Host mandatory; 1.0 and anything else are let through.
        if request.protocol_version == "1.1" and request.get_header("host") is None:
            raise RequestError(ErrorKind.BAD_REQUEST, "Missing Host header", method=method)

        return request
