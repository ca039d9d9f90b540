"""
=============================================================================
HTTP SERVER
=============================================================================

Wires the pieces together and runs them.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer ──accept──► HTTPServer._handle_connection()           │
    │                                   │                                  │
    │                                   └──► threading.Thread per client   │
    │                                            │                         │
    │                                            ▼                         │
    │                                   ConnectionHandler(conn)            │
    │                                     ├── RequestParser                │
    │                                     ├── MethodDispatcher             │
    │                                     │     └── StaticResolver         │
    │                                     └── AccessLog (shared, locked)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ONE THREAD PER CONNECTION
=============================================================================

Each accepted connection gets its own daemon thread and the accept loop
moves straight on. Workers share nothing but the access log. There is no
pool and no cap: a worker lives exactly as long as its connection.

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .access_log import AccessLog
from .config import ServerConfig
from .core.connection import Connection
from .core.socket_server import SocketServer
from .handlers.connection import ConnectionHandler
from .handlers.dispatch import MethodDispatcher
from .handlers.static import StaticResolver
from .http.request import RequestParser


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Static file server for GET, HEAD and TRACE.

    Usage:
        server = HTTPServer(ServerConfig(port=8080, document_root="www"))
        server.run()   # blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)

        self.access_log = AccessLog(self.config.access_log)
        self.resolver = StaticResolver(self.config.document_root, self.config.default_documents)
        self.dispatcher = MethodDispatcher(self.resolver, self.config.server_name)
        self.handler = ConnectionHandler(
            RequestParser(),
            self.dispatcher,
            self.access_log,
            max_header_lines=self.config.max_header_lines,
        )


    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    def bind(self) -> Tuple[str, int]:
        """
        Bind the listening socket without starting to accept.

        Lets callers report "port in use" before committing to run().
        """
        return self._socket_server.bind()

    def run(self, setup_logging: bool = True):
        """
        Serve until shutdown (blocking).

        Args:
            setup_logging: Configure the root logger from config.log_level.
                           Pass False when embedding in an app that
                           configures logging itself.
        """
        if setup_logging:
            self.setup_logging()

        if not self.resolver.document_root.is_dir():
            logger.warning(f"Document root {self.resolver.document_root} is not a directory; "
                           f"every GET will be answered 404")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections; in-flight workers finish on their own."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("bws").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """Start a worker thread for a freshly accepted connection."""
        worker = threading.Thread(
            target=self.handler,
            args=(conn,),
            name=f"bws-{conn.id}",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as e:
            # Out of threads: drop this client, keep accepting.
            logger.error(f"[{conn.id}] Could not start worker: {e}")
            conn.close()
