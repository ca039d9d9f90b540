"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m bws 8080 --root ./public                         │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── BWS_DOCUMENT_ROOT=./public python -m bws 8080              │
    │                                                                      │
    │   3. Defaults in ServerConfig                                       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Tuple

from .core.line_reader import MAX_LINE_LENGTH, MAX_NULL_RUN
from .handlers.static import DEFAULT_DOCUMENTS
from .http.request import MAX_HEADER_LINES


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Server configuration.

    Usage:
        config = ServerConfig(port=8080, document_root="./public")
        config.validate()
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Interface to bind. 0.0.0.0 listens on all of them."""

    port: int = 8080
    """
    TCP port to listen on.
    0 asks the OS for any free port (handy in tests).
    """

    backlog: int = 128
    """Pending connections the OS queues before refusing new ones."""

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = "www"
    """Directory request paths are resolved against."""

    default_documents: Tuple[str, ...] = DEFAULT_DOCUMENTS
    """Tried in order when a path is not itself a readable file."""

    access_log: str = "access-log.txt"
    """Append-only access log file, one line per answered connection."""

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST LIMITS
    # ─────────────────────────────────────────────────────────────────────

    max_line_length: int = MAX_LINE_LENGTH
    """Longest header line accepted before the connection is dropped."""

    max_null_run: int = MAX_NULL_RUN
    """Consecutive NUL bytes tolerated in a line before the connection is dropped."""

    max_header_lines: int = MAX_HEADER_LINES
    """Header lines stored per request; reading stops at this many."""

    # ─────────────────────────────────────────────────────────────────────
    # IDENTITY / LOGGING
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "bws"
    """Value of the Server response header."""

    log_level: str = "INFO"
    """Diagnostic logging level (DEBUG traces every request)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        BWS_HOST           Bind address (default: 0.0.0.0)
        BWS_PORT           Port (default: 8080)
        BWS_DOCUMENT_ROOT  Document root (default: www)
        BWS_ACCESS_LOG     Access log file (default: access-log.txt)
        BWS_LOG_LEVEL      Logging level (default: INFO)
        """
        return cls(
            host=os.getenv("BWS_HOST", "0.0.0.0"),
            port=int(os.getenv("BWS_PORT", "8080")),
            document_root=os.getenv("BWS_DOCUMENT_ROOT", "www"),
            access_log=os.getenv("BWS_ACCESS_LOG", "access-log.txt"),
            log_level=os.getenv("BWS_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value.
        """
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.max_line_length < 1:
            raise ValueError("max_line_length must be >= 1")

        if self.max_null_run < 0:
            raise ValueError("max_null_run must be >= 0")

        if self.max_header_lines < 1:
            raise ValueError("max_header_lines must be >= 1")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
