"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, Tuple

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import FileServer, ServerConfig
from fileserver.core import Connection, FileStore


@pytest.fixture
def document_root(tmp_path: Path) -> Path:
    """Empty document root inside the test's temp directory."""
    root = tmp_path / "www"
    root.mkdir()
    return root


@pytest.fixture
def store(document_root: Path) -> FileStore:
    return FileStore(document_root)


@pytest.fixture
def config(document_root: Path) -> ServerConfig:
    """Test server configuration pointing at the temporary root."""
    return ServerConfig(
        host="127.0.0.1",
        document_root=str(document_root),
        min_workers=2,
        max_workers=8,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def socket_pair() -> Generator[Tuple[Connection, socket.socket], None, None]:
    """
    A Connection whose peer is a local socket.

    Write a request to the peer, run the handler on the connection, then
    read the response back from the peer.
    """
    server_side, client_side = socket.socketpair()
    conn = Connection(socket=server_side, address=("127.0.0.1", 50000))
    try:
        yield conn, client_side
    finally:
        conn.close()
        client_side.close()


def read_all(sock: socket.socket) -> bytes:
    """Read until the peer closes its side."""
    chunks = []
    while True:
        chunk = sock.recv(65536)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def split_response(raw: bytes) -> Tuple[str, dict, bytes]:
    """Split raw response bytes into (status line, headers, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


class ServerThread:
    """Runs a FileServer in a background thread."""

    def __init__(self, server: FileServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"setup_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def request(self, raw: bytes) -> bytes:
        """Send raw request bytes on a new connection, return the raw response."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=10.0) as sock:
            sock.sendall(raw)
            return read_all(sock)


@pytest.fixture
def running_server(config: ServerConfig, free_port: int) -> Generator[ServerThread, None, None]:
    """A live server on a free port, serving the temporary document root."""
    config.port = free_port
    server_thread = ServerThread(FileServer(config))
    server_thread.start()

    yield server_thread

    server_thread.stop()
