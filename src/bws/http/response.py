"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Builds and writes the responses this server sends. Every response is a
status line, a fixed set of headers, a blank line and (usually) a body.

=============================================================================
RESPONSE SHAPES
=============================================================================

    200 for GET/HEAD                      Error (400/404/501)
    ─────────────────                     ──────────────────────
    HTTP/1.1 200 OK                       HTTP/1.1 404 Not Found
    Date: <now>                           Date: <now>
    Connection: close                     Connection: close
    Server: bws                           Server: bws
    Last-Modified: <file mtime>           Content-Length: 25
    Content-Length: <file size>           Content-Type: text/html
    Content-Type: <by extension>
                                          <h1>Page Not Found</h1>
    <file bytes, GET only>

Every response says "Connection: close": one request per connection.

=============================================================================
HEAD AND CONTENT-LENGTH
=============================================================================

A response marked head_only writes its header and nothing else, yet its
Content-Length still describes the body a GET would have received. That
applies to error pages too: "HEAD /missing" gets "Content-Length: 25" and
no bytes after the blank line.

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Dict, Optional, Union

from .errors import ErrorKind
from .status_codes import HTTPStatus


DEFAULT_SERVER_NAME = "bws"

# Copy buffer for streaming file bodies.
FILE_CHUNK_SIZE = 512 * 1024


@dataclass
class HTTPResponse:
    """
    A response ready to be written to a connection.

    The body is either in memory (body) or on disk (body_path); a file body
    is only opened when the response is written.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    body_path: Optional[Path] = None
    head_only: bool = False
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Example: "HTTP/1.1 200 OK"."""
        return f"{self.version} {self.status.text}"

    @property
    def status_text(self) -> str:
        """Status line without the version: "200 OK"."""
        return self.status.text

    def header_bytes(self) -> bytes:
        """Serialize the status line and headers, blank line included."""
        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        return ("\r\n".join(lines) + "\r\n\r\n").encode("iso-8859-1")

    def write_to(self, stream: BinaryIO, chunk_size: int = FILE_CHUNK_SIZE) -> int:
        """
        Write the response to a binary stream and flush it.

        A file body is opened before anything is written, so a file that
        disappeared since it was resolved fails the write cleanly instead of
        leaving a header with no body behind it.

        Returns:
            Number of bytes written.

        Raises:
            OSError: On any socket or file error.
        """
        head = self.header_bytes()

        if self.head_only:
            stream.write(head)
            stream.flush()
            return len(head)

        if self.body_path is not None:
            with open(self.body_path, "rb") as source:
                stream.write(head)
                written = len(head)
                while True:
                    chunk = source.read(chunk_size)
                    if not chunk:
                        break
                    stream.write(chunk)
                    written += len(chunk)
            stream.flush()
            return written

        stream.write(head + self.body)
        stream.flush()
        return len(head) + len(self.body)


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Headers are emitted in the order their methods are called, so callers
    decide the header order:

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .date(now)
            .close_connection()
            .server()
            .content_length(len(body))
            .content_type("message/http")
            .body(body)
            .build())
    """

    def __init__(self, server_name: str = DEFAULT_SERVER_NAME):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body = b""
        self._body_path: Optional[Path] = None
        self._head_only = False
        self._server_name = server_name

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def date(self, when: Optional[datetime] = None) -> "ResponseBuilder":
        """Date header; defaults to now."""
        return self.header("Date", format_http_date(when or datetime.now(timezone.utc)))

    def close_connection(self) -> "ResponseBuilder":
        return self.header("Connection", "close")

    def server(self) -> "ResponseBuilder":
        return self.header("Server", self._server_name)

    def last_modified(self, when: Union[datetime, float]) -> "ResponseBuilder":
        """Last-Modified header from a datetime or a POSIX timestamp."""
        if not isinstance(when, datetime):
            when = datetime.fromtimestamp(when, tz=timezone.utc)
        return self.header("Last-Modified", format_http_date(when))

    def content_length(self, length: int) -> "ResponseBuilder":
        return self.header("Content-Length", str(length))

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        if isinstance(body, str):
            body = body.encode("iso-8859-1")
        self._body = body
        self._body_path = None
        return self

    def file(self, path: Union[str, Path]) -> "ResponseBuilder":
        """Stream the body from a file when the response is written."""
        self._body_path = Path(path)
        self._body = b""
        return self

    def head_only(self, head_only: bool = True) -> "ResponseBuilder":
        """Send the header but never the body."""
        self._head_only = head_only
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
            body_path=self._body_path,
            head_only=self._head_only,
        )


def error_response(
    kind: ErrorKind,
    now: Optional[datetime] = None,
    server_name: str = DEFAULT_SERVER_NAME,
    head_only: bool = False,
) -> HTTPResponse:
    """
    Build the fixed error page for an ErrorKind.

    Args:
        kind: Which error page to send.
        now: Date header value; defaults to the current time.
        server_name: Server header value.
        head_only: True when answering HEAD; the body is then dropped but
                   Content-Length still gives its size.
    """
    return (ResponseBuilder(server_name)
        .status(kind.status)
        .date(now)
        .close_connection()
        .server()
        .content_length(len(kind.body))
        .content_type("text/html")
        .body(kind.body)
        .head_only(head_only)
        .build())


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231 IMF-fixdate).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Sun, 18 Oct 2026 10:00:00 GMT

    Aware datetimes are converted to UTC first; naive ones are taken to
    already be UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
