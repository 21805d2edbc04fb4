"""
=============================================================================
FILE SERVER
=============================================================================

Ties the components together: accept a connection, read one request,
run it against the document root, write the response, close.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer ──accept──► ThreadPool ──► ConnectionHandler         │
    │                                                │                     │
    │                         ┌──────────────────────┼───────────────┐     │
    │                         ▼                      ▼               ▼     │
    │                   RequestParser     Middleware → Generator   Connection
    │                                                │                     │
    │                                                ▼                     │
    │                                            FileStore                 │
    │                                         (one write lock)             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. SocketServer accepts a TCP connection
    2. The connection is queued in the ThreadPool
    3. A worker calls ConnectionHandler(conn):
       a. RequestParser reads the request from conn.reader
       b. Middleware (access log) → ResponseGenerator → HTTPResponse
       c. The response bytes are sent
       d. The connection is closed, always
    4. The worker picks up the next connection

=============================================================================
FAILURE HANDLING
=============================================================================

Every failure stays inside its own connection:

    Bad Content-Length      → logged, closed, nothing sent
    Socket/disk error       → logged, closed, no retry
    Unexpected exception    → logged with traceback, closed

The write lock inside FileStore is released by ``with`` whatever happens,
so a failed upload never blocks other clients.

=============================================================================
"""

import logging
from typing import Optional, Tuple

from .config import ServerConfig
from .core import Connection, ConnectionState, FileStore, SocketServer, ThreadPool
from .handlers import ResponseGenerator
from .http import HTTPParseError, RequestParser
from .middleware import LoggingMiddleware, Middleware, MiddlewarePipeline, NextHandler


logger = logging.getLogger(__name__)


class ConnectionHandler:
    """
    Serves exactly one request per connection.

    One instance is shared by all worker threads. It keeps no state
    between calls; the only shared mutable state lives in the FileStore's
    lock and on disk.

    Usage:
        handler = ConnectionHandler(ServerConfig(document_root=tmp_path))
        handler(conn)  # parse → dispatch → respond → close
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        store: Optional[FileStore] = None,
        middleware: Optional[MiddlewarePipeline] = None,
    ):
        """
        Args:
            config: Document root, MIME table and body limit.
            store: File store to use instead of one built from config.
            middleware: Pipeline wrapped around the generator. Defaults to
                        an access-logging pipeline.
        """
        self.config = config or ServerConfig()
        self.store = store or FileStore(self.config.document_root)
        self.parser = RequestParser(max_body_size=self.config.max_body_size)
        self.generator = ResponseGenerator(self.store, self.config.mime_types)

        if middleware is None:
            middleware = MiddlewarePipeline()
            middleware.add(LoggingMiddleware(log_format=self.config.access_log_format))
        self._handle: NextHandler = middleware.wrap(self.generator.generate)

    def __call__(self, conn: Connection) -> None:
        with conn:
            try:
                conn.state = ConnectionState.READING
                request = self.parser.parse(conn.reader, conn.address)

                conn.state = ConnectionState.PROCESSING
                response = self._handle(request)

                conn.send_response(response.to_bytes())

            except HTTPParseError as e:
                logger.warning(f"[{conn.id}] Dropping malformed request from {conn.client_ip}: {e}")

            except OSError as e:
                logger.error(f"[{conn.id}] Client handling exception: {e}")

            except Exception as e:
                logger.exception(f"[{conn.id}] Unexpected error: {e}")


class FileServer:
    """
    HTTP/1.1 file-and-directory server.

    Usage:
        server = FileServer(ServerConfig(port=8080, document_root="./www"))
        server.run()  # Blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses the defaults if not provided.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail fast on invalid config

        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.access_log_format))

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._store = FileStore(self.config.document_root)

        # Built in run(), once all middleware is registered
        self._handler: Optional[ConnectionHandler] = None

        self._running = False

    def use(self, middleware: Middleware) -> "FileServer":
        """
        Add middleware around the response generator.

        Must be called before run(). Returns self for chaining.
        """
        self._middleware.add(middleware)
        return self

    @property
    def store(self) -> FileStore:
        return self._store

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port) once listening."""
        return self._socket_server.address

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def run(self, setup_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            setup_logging: Configure the root logger from config.log_level.
                           Embedders and tests that configure logging
                           themselves pass False.
        """
        if setup_logging:
            self._setup_logging()

        self._handler = ConnectionHandler(
            self.config,
            store=self._store,
            middleware=self._middleware,
        )

        self._running = True
        self._thread_pool.start()

        logger.info(
            f"Serving {self.config.document_root} on "
            f"{self.config.host}:{self.config.port} "
            f"({self.config.min_workers}-{self.config.max_workers} workers)"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Stop accepting connections. run() returns once in-flight work ends."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("fileserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=30.0)
        logger.info("Server stopped")

    def _handle_connection(self, conn: Connection):
        """Called by SocketServer for each accepted connection."""
        self._thread_pool.submit(self._handler, conn)
