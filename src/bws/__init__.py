"""
=============================================================================
BWS - BASIC WEB SERVER
=============================================================================

A small HTTP/1.x origin server built directly on sockets. It answers
exactly one request per connection and serves files from a document root.

=============================================================================
WHAT IT DOES
=============================================================================

    GET    /path     → the file, or index.html / index.htm in that directory
    HEAD   /path     → the same headers as GET, no body
    TRACE  /path     → the request head echoed back as message/http
    other methods    → 501 Not Implemented
    malformed        → 400 Bad Request
    nothing there    → 404 Not Found

Every answered connection appends one line to the access log:

    18/Oct/2026 10:00:00 - 127.0.0.1 "GET /index.html HTTP/1.1" 200 OK

=============================================================================
PACKAGE LAYOUT
=============================================================================

    bws/
    ├── core/          Sockets, connections, bounded line reading
    ├── http/          Request parsing, responses, status codes, MIME types
    ├── handlers/      Path resolution, method dispatch, per-connection flow
    ├── access_log.py  Shared append-only access log
    ├── config.py      ServerConfig (defaults, env vars, validation)
    └── server.py      HTTPServer: wires it all together

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
