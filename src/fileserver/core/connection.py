"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the single request it will carry.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does not preserve message boundaries. A request line may arrive split
across several recv() calls, or glued to the headers and body:

    First recv():  "GET /index.ht"
    Second recv(): "ml HTTP/1.1\r\nHost: ..."

Instead of buffering by hand, we let the socket's file object do it.
``socket.makefile("rb")`` returns a buffered reader whose readline()
blocks until a full line (or EOF) is available and whose read(n) blocks
until n bytes (or EOF) have arrived. That is exactly the line-oriented
stream the request parser consumes.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      CONNECTION LIFECYCLE                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED │
    │                │                          │                          │
    │                └──── error ───────────────┴──────► CLOSING          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no keep-alive. Whatever happens, the connection is closed after
the first request, whether or not a response could be sent.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)

# Upper bounds for reading leftover bytes in close()
DRAIN_TIMEOUT = 0.5  # seconds, in total
DRAIN_LIMIT = 64 * 1024  # bytes


class ConnectionState(Enum):
    """Connection lifecycle states, used for logging and close()."""

    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Parsing the request
    PROCESSING = "processing"  # Generating the response
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier for log lines.
        state: Current lifecycle state.
        created_at: Timestamp when the connection was accepted.
        timeout: Socket timeout in seconds. None blocks indefinitely.
    """

    socket: socket.socket
    address: tuple
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    timeout: Optional[float] = None

    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # settimeout(None) puts the socket in blocking mode
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def reader(self) -> BinaryIO:
        """
        Buffered, line-oriented view of the incoming bytes.

        Created on first use; closed together with the connection.
        """
        if self._reader is None:
            self._reader = self.socket.makefile("rb")
        return self._reader

    def send_response(self, data: bytes) -> None:
        """
        Send a complete response.

        Uses sendall() so a large file is not cut short when the kernel
        send buffer is full.

        Raises:
            OSError: The peer went away or the socket failed.
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN so the client sees the end of the
           response immediately.
        2. Drain briefly: unread request bytes left in the kernel buffer
           would otherwise make close() send RST, which can destroy the
           response before the client reads it. The drain stops after
           DRAIN_TIMEOUT seconds or DRAIN_LIMIT bytes, whichever comes
           first, so a trickling client cannot hold the worker.
        3. close(): release the file descriptor.

        Safe to call more than once. Failures are logged, never raised.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already disconnected

        try:
            deadline = time.monotonic() + DRAIN_TIMEOUT
            drained = 0
            while drained < DRAIN_LIMIT:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            if self._reader is not None:
                self._reader.close()
            self.socket.close()
        except OSError as e:
            logger.warning(f"[{self.id}] Error closing client socket: {e}")

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                request = parser.parse(conn.reader)
                conn.send_response(data)
            # Connection closed here, even on error
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
