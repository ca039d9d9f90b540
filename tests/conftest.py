"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bws import HTTPServer, ServerConfig
from bws.handlers import StaticResolver, MethodDispatcher


INDEX_HTML = b"<html><body>home</body></html>\n"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def document_root(tmp_path: Path) -> Path:
    """
    A small site:

        www/index.html
        www/style.css
        www/docs/index.htm
        www/empty/            (no default document)
    """
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "style.css").write_bytes(b"body { color: red; }\n")
    (root / "docs").mkdir()
    (root / "docs" / "index.htm").write_bytes(b"<p>docs</p>\n")
    (root / "empty").mkdir()
    return root


@pytest.fixture
def resolver(document_root: Path) -> StaticResolver:
    return StaticResolver(document_root)


@pytest.fixture
def dispatcher(resolver: StaticResolver) -> MethodDispatcher:
    return MethodDispatcher(resolver)


@pytest.fixture
def config(document_root: Path, tmp_path: Path) -> ServerConfig:
    """Test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        document_root=str(document_root),
        access_log=str(tmp_path / "access-log.txt"),
        log_level="WARNING",
    )


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    @property
    def access_log_path(self) -> Path:
        return self.server.access_log.path

    def start(self):
        """Start server in background thread."""
        self.server.bind()
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"setup_logging": False},
            daemon=True
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def send(self, raw: bytes, timeout: float = 5.0) -> bytes:
        """Send raw bytes and read until the server closes the connection."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=timeout) as s:
            try:
                s.sendall(raw)
            except OSError:
                # The server may hang up before a flood is fully written.
                pass
            chunks = []
            while True:
                try:
                    chunk = s.recv(65536)
                except ConnectionResetError:
                    break
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def access_log_lines(self):
        if not self.access_log_path.exists():
            return []
        return self.access_log_path.read_text(encoding="iso-8859-1").splitlines()


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """Create and start a test server on a free port."""
    test_srv = TestServer(HTTPServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()


def split_response(raw: bytes):
    """
    Split a raw response into (status line, header dict, body).

    Header names keep their case; order is preserved.
    """
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


@pytest.fixture
def parse_response():
    return split_response


@pytest.fixture
def index_html() -> bytes:
    """Contents of www/index.html in document_root."""
    return INDEX_HTML
