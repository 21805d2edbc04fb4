"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

Low-level plumbing underneath the HTTP handling.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Binds IP:PORT, runs the accept() loop                            │
    │  • Wraps each client socket in a Connection                         │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    │  • One task per accepted connection                                 │
    │  • Bounded queue, min/max workers                                   │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • Line-buffered reader over the socket                             │
    │  • sendall() and graceful close                                     │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          FILE STORE                                  │
    │  • Resolves resources below the document root                       │
    │  • Serializes every create/overwrite/delete behind one lock         │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .thread_pool import ThreadPool
from .file_store import FileStore

__all__ = [
    "SocketServer",     # Accepts connections
    "Connection",       # Wrapper for a client socket
    "ConnectionState",  # Connection lifecycle states
    "ThreadPool",       # Worker threads
    "FileStore",        # Document root access + write lock
]
