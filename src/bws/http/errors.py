"""
Request-level error kinds.

Every request-level failure is one of three kinds. Each kind carries its
status code and the fixed HTML page sent with it, so turning a failure into
a response is a table lookup made in exactly one place (the connection
handler).
"""

from enum import Enum
from typing import Optional

from .status_codes import HTTPStatus


class ErrorKind(Enum):
    """Request failures that are answered with an error page."""

    BAD_REQUEST = (HTTPStatus.BAD_REQUEST, "<h1>Bad Request</h1>\r\n")
    NOT_FOUND = (HTTPStatus.NOT_FOUND, "<h1>Page Not Found</h1>\r\n")
    NOT_IMPLEMENTED = (HTTPStatus.NOT_IMPLEMENTED, "<h1>Not Implemented</h1>\r\n")

    def __init__(self, status: HTTPStatus, body: str):
        self.status = status
        self.body = body.encode("ascii")


class RequestError(Exception):
    """
    Raised when a request cannot be served.

    Carries the ErrorKind to answer with and, when the parser got far
    enough to accept it, the request's method. The method matters for one
    rule only: an error answer to HEAD is sent without its body.
    """

    def __init__(self, kind: ErrorKind, message: str = "", method: Optional[str] = None):
        super().__init__(message or kind.status.text)
        self.kind = kind
        self.method = method
