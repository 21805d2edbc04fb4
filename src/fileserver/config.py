"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the file server.

The request-handling core never reads the environment or the command line
itself. It receives a ServerConfig instance, which makes it trivial for
tests to point the server at a temporary document root.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m fileserver --port 3000 --root ./public          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_PORT=3000 python -m fileserver                       │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │      └── port 8080, document root ./www                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from .http.mime_types import MIME_TYPES


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout

    FILE STORE
    - document_root, max_body_size, mime_types

    THREADING SETTINGS
    - min_workers, max_workers, queue_size

    LOGGING
    - log_level, access_log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces (containers)
    """

    port: int = 8080
    """The port number to listen on."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = blocking. A client that never finishes its request line keeps
    its worker busy until it disconnects.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILE STORE
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = "./www"
    """Directory that every request path is resolved against."""

    max_body_size: Optional[int] = None
    """
    Largest Content-Length accepted for an upload. None = no limit.
    When set, larger declarations abort the connection without a response.
    """

    mime_types: Dict[str, str] = field(default_factory=lambda: dict(MIME_TYPES))
    """Extension (with leading dot) → Content-Type table."""

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    """Worker threads created at startup."""

    max_workers: int = 16
    """Upper bound for worker threads under load."""

    queue_size: int = 100
    """
    Accepted connections waiting for a worker.
    When full, the accept loop waits for space instead of rejecting.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    access_log_format: str = "text"
    """Access log format: 'text' (Apache-like) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST           Server host (default: 127.0.0.1)
        HTTP_PORT           Server port (default: 8080)
        HTTP_DOCUMENT_ROOT  Document root (default: ./www)
        HTTP_WORKERS        Max worker threads (default: 16)
        HTTP_LOG_LEVEL      Logging level (default: INFO)

        =====================================================================
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            document_root=os.getenv("HTTP_DOCUMENT_ROOT", "./www"),
            max_workers=int(os.getenv("HTTP_WORKERS", "16")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad value fails immediately instead of
        on the first request.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        if self.max_body_size is not None and self.max_body_size < 0:
            raise ValueError("max_body_size must be >= 0")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.access_log_format not in ("text", "json"):
            raise ValueError(f"Unknown access_log_format: {self.access_log_format}")
