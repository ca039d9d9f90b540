"""
=============================================================================
ACCESS LOG
=============================================================================

One line per answered connection, appended to a plain text file:

    18/Oct/2026 10:00:00 - 127.0.0.1 "GET /index.html HTTP/1.1" 200 OK
    ──────────┬────────    ────┬────  ──────────┬───────────────  ──┬───
        timestamp (GMT)    client IP      request line          status

=============================================================================
CONCURRENCY
=============================================================================

Every worker thread shares the one AccessLog instance it was handed. Each
append opens the file, writes a whole line and closes it while holding a
lock, so lines from concurrent connections never interleave.

=============================================================================
FAILURES
=============================================================================

Logging is best-effort. If the file cannot be opened or written, the error
goes to the "bws.access" logger and the connection carries on.

=============================================================================
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Union


logger = logging.getLogger("bws.access")


@dataclass(frozen=True)
class LogEntry:
    """
    One access log line.

    Attributes:
        timestamp: When the connection started being served.
        client_ip: Peer address in dotted form.
        request_line: First line of the request, "" if none was read.
        status_text: Code and reason sent, e.g. "404 Not Found".
    """

    timestamp: datetime
    client_ip: str
    request_line: str
    status_text: str

    def to_text(self) -> str:
        timestamp = self.timestamp
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(timezone.utc)
        return (
            f'{timestamp.strftime("%d/%b/%Y %H:%M:%S")} - {self.client_ip} '
            f'"{self.request_line}" {self.status_text}'
        )


class AccessLog:
    """
    Append-only, thread-safe access log file.

    The file is created on first append if it does not exist.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, entry: LogEntry) -> bool:
        """
        Append one entry.

        Returns:
            True if the line was written, False if writing failed.
        """
        line = entry.to_text() + "\n"
        with self._lock:
            try:
                with open(self.path, "a", encoding="iso-8859-1", errors="replace") as f:
                    f.write(line)
            except OSError as e:
                logger.error(f"Failed to write to access log {self.path.resolve()}: {e}")
                return False

        logger.debug(f"Logged: {line.rstrip()}")
        return True
