"""
=============================================================================
SOCKET SERVER
=============================================================================

Owns the listening TCP socket and the accept loop. Every accepted socket
is wrapped in a Connection and handed to a callback; the callback decides
how the connection gets processed (the file server submits it to the
thread pool).

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   socket()   Create a TCP socket                                    │
    │      │                                                               │
    │   bind()     Claim host:port (SO_REUSEADDR for quick restarts)      │
    │      │                                                               │
    │   listen()   Let the kernel queue up to `backlog` handshakes        │
    │      │                                                               │
    │   accept()   ◄──┐  Returns a NEW socket per client                  │
    │      │          │                                                    │
    │   callback(conn)┘  Loop until shutdown()                            │
    │      │                                                               │
    │   close()    Release the port                                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

accept() waits with a 1 second timeout so the loop notices shutdown()
even when no client ever connects.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    TCP server that accepts connections and hands them to a callback.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration (host, port, backlog, timeout).

        The socket is created lazily in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set while the socket is listening
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port). Reflects the real port once listening."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Avoid "Address already in use" while old sockets sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Poll interval for the shutdown flag
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """
        Turn SIGTERM (docker stop, kill) and SIGINT (Ctrl+C) into a clean
        shutdown.

        Python only allows signal handlers on the main thread, so a server
        started from a background thread (as in tests) skips this.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept connections until shutdown().

        Args:
            connection_handler: Called once per accepted connection. It
                                takes ownership of the connection.

        Raises:
            OSError: The address could not be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._setup_signals()
        self._ready_event.set()

        host, port = self.address
        logger.info(f"Server is listening on {host}:{port}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Check the running flag again
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                timeout=self.config.timeout,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                # Never let one connection take the accept loop down
                logger.exception(f"[{conn.id}] Could not dispatch connection: {e}")
                conn.close()

    def shutdown(self):
        """
        Stop accepting connections.

        Safe to call from a signal handler, another thread, or repeatedly.
        The loop exits within one accept timeout.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass  # Already closed
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. Returns False on timeout."""
        return self._ready_event.wait(timeout)
