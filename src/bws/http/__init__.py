"""
=============================================================================
HTTP MODULE
=============================================================================

The protocol layer: turns header lines into requests and responses into
bytes on the wire.

    Header lines ──► RequestParser ──► HTTPRequest
                          │
                          └── RequestError(ErrorKind) on anything malformed

    ResponseBuilder ──► HTTPResponse ──► write_to(stream)

=============================================================================
"""

from .request import HTTPRequest, RequestParser, read_request_head, MAX_HEADER_LINES
from .response import (
    HTTPResponse,
    ResponseBuilder,
    error_response,
    format_http_date,
    DEFAULT_SERVER_NAME,
)
from .errors import ErrorKind, RequestError
from .status_codes import HTTPStatus
from .mime_types import get_content_type, get_extension, DEFAULT_MIME_TYPE

__all__ = [
    # Request
    "HTTPRequest",
    "RequestParser",
    "read_request_head",
    "MAX_HEADER_LINES",

    # Response
    "HTTPResponse",
    "ResponseBuilder",
    "error_response",
    "format_http_date",
    "DEFAULT_SERVER_NAME",

    # Errors
    "ErrorKind",
    "RequestError",

    # Status codes
    "HTTPStatus",

    # MIME types
    "get_content_type",
    "get_extension",
    "DEFAULT_MIME_TYPE",
]
