"""
=============================================================================
HANDLERS MODULE
=============================================================================

Turns a parsed request into a response.

    ConnectionHandler     read → parse → dispatch → write → log, per connection
        └── MethodDispatcher    GET / HEAD / TRACE, 501 for the rest
                └── StaticResolver    request path → file under the root

=============================================================================
"""

from .static import StaticResolver, ResolvedResource, DEFAULT_DOCUMENTS
from .dispatch import MethodDispatcher
from .connection import ConnectionHandler

__all__ = [
    "StaticResolver",
    "ResolvedResource",
    "DEFAULT_DOCUMENTS",
    "MethodDispatcher",
    "ConnectionHandler",
]
