"""
=============================================================================
METHOD DISPATCH
=============================================================================

Routes a validated request to the code for its method.

    ┌──────────┬───────────────────────────────────────────────────────────┐
    │ Method   │ Response                                                  │
    ├──────────┼───────────────────────────────────────────────────────────┤
    │ GET      │ 200, file headers, file body                              │
    │ HEAD     │ 200, the same headers GET would send, no body             │
    │ TRACE    │ 200, message/http, the received head echoed back          │
    │ other    │ RequestError(NOT_IMPLEMENTED) → 501                       │
    └──────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from .static import StaticResolver
from ..http.errors import ErrorKind, RequestError
from ..http.request import HTTPRequest
from ..http.response import DEFAULT_SERVER_NAME, HTTPResponse, ResponseBuilder
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class MethodDispatcher:
    """
    Builds the response for a validated request.

    Usage:
        dispatcher = MethodDispatcher(StaticResolver("www"))
        response = dispatcher.dispatch(request, now)
    """

    def __init__(self, resolver: StaticResolver, server_name: str = DEFAULT_SERVER_NAME):
        self.resolver = resolver
        self.server_name = server_name
        self._handlers: Dict[str, Callable[[HTTPRequest, datetime], HTTPResponse]] = {
            "GET": self.get,
            "HEAD": self.head,
            "TRACE": self.trace,
        }

    def dispatch(self, request: HTTPRequest, now: Optional[datetime] = None) -> HTTPResponse:
        """
        Build the response for a request.

        Args:
            request: Validated request.
            now: Time used for the Date header; defaults to the current time.

        Raises:
            RequestError: NOT_FOUND from resolution, NOT_IMPLEMENTED for
                          methods other than GET, HEAD and TRACE.
        """
        now = now or datetime.now(timezone.utc)
        handler = self._handlers.get(request.method)
        if handler is None:
            raise RequestError(
                ErrorKind.NOT_IMPLEMENTED,
                f"{request.method} not implemented",
                method=request.method,
            )
        logger.debug(f"Method: {request.method} Resource: {request.path} "
                     f"Version: {request.protocol_version}")
        return handler(request, now)

    def get(self, request: HTTPRequest, now: datetime) -> HTTPResponse:
        return self._file_response(request, now, head_only=False)

    def head(self, request: HTTPRequest, now: datetime) -> HTTPResponse:
        return self._file_response(request, now, head_only=True)

    def trace(self, request: HTTPRequest, now: datetime) -> HTTPResponse:
        """Echo the received head: every line plus CRLF, then one more CRLF."""
        received = "".join(line + "\r\n" for line in request.header_lines) + "\r\n"
        body = received.encode("iso-8859-1")
        return (ResponseBuilder(self.server_name)
            .status(HTTPStatus.OK)
            .date(now)
            .close_connection()
            .server()
            .content_length(len(body))
            .content_type("message/http")
            .body(body)
            .build())

    def _file_response(self, request: HTTPRequest, now: datetime, head_only: bool) -> HTTPResponse:
        try:
            resource = self.resolver.resolve(request.path)
        except RequestError as e:
            e.method = request.method
            raise

        return (ResponseBuilder(self.server_name)
            .status(HTTPStatus.OK)
            .date(now)
            .close_connection()
            .server()
            .last_modified(resource.last_modified)
            .content_length(resource.size)
            .content_type(resource.content_type)
            .file(resource.path)
            .head_only(head_only)
            .build())
