"""
=============================================================================
CONNECTION HANDLER
=============================================================================

Runs one connection from first byte to close. This is the only place where
request errors become error responses and the only place connections end.

=============================================================================
FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   READING      read_request_head()                                   │
    │      │            └── TransportError ────────────────────────┐      │
    │      ▼                                                        │      │
    │   VALIDATING   RequestParser.parse()        ─┐                │      │
    │      │                                       ├─ RequestError  │      │
    │      ▼                                       │   → error page │      │
    │   RESOLVING    MethodDispatcher.dispatch()  ─┘                │      │
    │      │                                                        │      │
    │      ▼                                                        │      │
    │   RESPONDING   response.write_to(wfile)                       │      │
    │      │            └── OSError ───────────────────────────────┤      │
    │      ▼                                                        │      │
    │   LOGGING      AccessLog.append()                             │      │
    │      │                                                        │      │
    │      ▼                                                        ▼      │
    │   CLOSED       conn.close()  ◄── always, via the with block          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Transport failures send nothing and log nothing; the peer just sees the
connection close.

=============================================================================
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from .dispatch import MethodDispatcher
from ..access_log import AccessLog, LogEntry
from ..core.connection import Connection, ConnectionState
from ..core.line_reader import TransportError
from ..http.errors import RequestError
from ..http.request import MAX_HEADER_LINES, RequestParser, read_request_head
from ..http.response import HTTPResponse, error_response


logger = logging.getLogger(__name__)


class ConnectionHandler:
    """
    Serves exactly one request per connection.

    Instances hold no per-connection state, so one handler is shared by
    every worker thread. The access log is the only shared resource and is
    passed in explicitly.

    Usage:
        handler = ConnectionHandler(RequestParser(), dispatcher, AccessLog("access-log.txt"))
        threading.Thread(target=handler, args=(conn,)).start()
    """

    def __init__(
        self,
        parser: RequestParser,
        dispatcher: MethodDispatcher,
        access_log: AccessLog,
        max_header_lines: int = MAX_HEADER_LINES,
    ):
        self.parser = parser
        self.dispatcher = dispatcher
        self.access_log = access_log
        self.max_header_lines = max_header_lines

    def __call__(self, conn: Connection) -> None:
        """Entry point for a worker thread; never raises."""
        try:
            with conn:
                self.handle(conn)
        except Exception as e:
            logger.exception(f"[{conn.id}] Connection error: {e}")

    def handle(self, conn: Connection) -> Optional[HTTPResponse]:
        """
        Read, answer and log one request. Does not close the connection.

        Returns:
            The response sent, or None if the exchange ended in a transport
            failure.
        """
        now = datetime.now(timezone.utc)
        logger.debug(f"[{conn.id}] New request from {conn.client_ip}:{conn.client_port}")

        conn.state = ConnectionState.READING
        try:
            lines = read_request_head(conn.reader, self.max_header_lines)
        except TransportError as e:
            logger.debug(f"[{conn.id}] Dropping connection: {e}")
            return None

        response = self.respond(conn, lines, now)

        conn.state = ConnectionState.RESPONDING
        try:
            response.write_to(conn.wfile)
        except OSError as e:
            logger.debug(f"[{conn.id}] Send failed: {e}")
            return None

        conn.state = ConnectionState.LOGGING
        self.access_log.append(LogEntry(
            timestamp=now,
            client_ip=conn.client_ip,
            request_line=lines[0] if lines else "",
            status_text=response.status_text,
        ))
        return response

    def respond(self, conn: Connection, lines: List[str], now: datetime) -> HTTPResponse:
        """Build the response for a request head, error pages included."""
        try:
            conn.state = ConnectionState.VALIDATING
            request = self.parser.parse(lines, conn.address)

            conn.state = ConnectionState.RESOLVING
            return self.dispatcher.dispatch(request, now)
        except RequestError as e:
            logger.debug(f"[{conn.id}] {e.kind.status.text}: {e}")
            return error_response(
                e.kind,
                now,
                server_name=self.dispatcher.server_name,
                head_only=e.method == "HEAD",
            )
