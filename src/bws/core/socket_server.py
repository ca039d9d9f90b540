"""
=============================================================================
ACCEPTOR
=============================================================================

Owns the listening socket and nothing else. Every accepted client is
wrapped in a Connection and handed to a callback; what happens to it after
that is the callback's business.

=============================================================================
ONE LISTENING SOCKET, MANY CLIENT SOCKETS
=============================================================================

    bind(host, port) + listen(backlog)
            │
            ▼
    ┌──────────────────┐  accept()   ┌──────────────┐
    │ listening socket │ ──────────► │ Connection   │ ──► callback(conn)
    │  (timeout 1s)    │             │ (blocking)   │
    └──────────────────┘             └──────────────┘
            ▲                                │
            └──────── loop until shutdown() ─┘

Port 0 asks the OS for any free port; `address` reports the real one once
bound.

=============================================================================
STOPPING
=============================================================================

accept() wakes up at least once a second, so a shutdown() from another
thread or from SIGINT/SIGTERM is noticed within a second even when nobody
connects. Connections already handed off are not touched.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from .connection import Connection

if TYPE_CHECKING:
    from ..config import ServerConfig


logger = logging.getLogger(__name__)

ACCEPT_POLL_INTERVAL = 1.0

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SocketServer:
    """
    Bind, listen and accept.

    Usage:
        server = SocketServer(config)
        server.bind()                  # OSError here if the port is taken
        server.start(on_connection)    # blocks until shutdown()
    """

    def __init__(self, config: "ServerConfig"):
        """
        Args:
            config: Uses host, port, backlog and the line reader limits.

        No socket exists until bind() or start().
        """
        self.config = config
        self._listener: Optional[socket.socket] = None
        self._accepting = False
        self._ready = threading.Event()
        self._previous_handlers: Dict[int, object] = {}

    @property
    def address(self) -> Tuple[str, int]:
        """(host, port) actually bound, or the configured pair before bind()."""
        if self._listener is None:
            return (self.config.host, self.config.port)
        return self._listener.getsockname()[:2]

    def bind(self) -> Tuple[str, int]:
        """
        Create the listening socket. Calling it again is a no-op.

        Returns:
            The bound (host, port).

        Raises:
            OSError: Address in use, permission denied, unknown host.
        """
        if self._listener is not None:
            return self.address

        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.settimeout(ACCEPT_POLL_INTERVAL)
        try:
            listener.bind((self.config.host, self.config.port))
            listener.listen(self.config.backlog)
        except OSError as e:
            listener.close()
            logger.error(f"Cannot listen on {self.config.host}:{self.config.port}: {e}")
            raise

        self._listener = listener
        return self.address

    def start(self, on_connection: Callable[[Connection], None]):
        """
        Accept until shutdown(). Binds first if needed.

        Args:
            on_connection: Called on the accepting thread for every client.
                           Must return quickly; the HTTP server starts a
                           worker thread and returns.
        """
        self.bind()
        self._accepting = True
        self._install_signal_handlers()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready.set()

        try:
            while self._accepting:
                conn = self._accept_one()
                if conn is not None:
                    on_connection(conn)
        finally:
            self._close_listener()

    def _accept_one(self) -> Optional[Connection]:
        try:
            client, client_address = self._listener.accept()
        except socket.timeout:
            return None
        except OSError as e:
            if self._accepting:
                logger.error(f"Accept failed: {e}")
            self._accepting = False
            return None

        logger.debug(f"Accepted {client_address[0]}:{client_address[1]}")
        try:
            return Connection(
                socket=client,
                address=client_address,
                max_line_length=self.config.max_line_length,
                max_null_run=self.config.max_null_run,
            )
        except OSError as e:
            logger.error(f"Could not set up connection from {client_address[0]}: {e}")
            client.close()
            return None

    def shutdown(self):
        """Stop accepting. Safe from any thread and safe to repeat."""
        if self._accepting:
            logger.info("Stopping acceptor")
        self._accepting = False

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until start() is accepting. False on timeout."""
        return self._ready.wait(timeout)

    def _install_signal_handlers(self):
        # signal.signal() only works on the main thread; embedded and test
        # servers run elsewhere and are stopped with shutdown().
        if threading.current_thread() is not threading.main_thread():
            return

        def on_signal(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, shutting down")
            self.shutdown()

        for signum in STOP_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, on_signal)

    def _close_listener(self):
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

        if self._listener is not None:
            self._listener.close()
            self._listener = None

        self._ready.clear()
        logger.info("Acceptor stopped")
