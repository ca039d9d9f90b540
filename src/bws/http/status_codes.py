"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server can answer with.

    ┌──────┬──────────────────┬──────────────────────────────────────────┐
    │ Code │ Reason           │ Sent when                                │
    ├──────┼──────────────────┼──────────────────────────────────────────┤
    │ 200  │ OK               │ GET/HEAD found a file, TRACE echo        │
    │ 400  │ Bad Request      │ Bad request line, missing Host on 1.1    │
    │ 404  │ Not Found        │ No file and no default document          │
    │ 501  │ Not Implemented  │ OPTIONS, POST, PUT, DELETE, CONNECT      │
    └──────┴──────────────────┴──────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes with their reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    NOT_IMPLEMENTED = 501

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _PHRASES[self]

    @property
    def text(self) -> str:
        """Code and reason as they appear after the version: '404 Not Found'."""
        return f"{self.value} {self.phrase}"


_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
}
